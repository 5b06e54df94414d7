"""
Street name normalizer.

Turns a raw street name into the key used for dictionary lookups, following
the rules of a Locale: case and letter folding, punctuation and whitespace
standardization, and abbreviation expansion and placement of the status part.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .base import Normalizer
from .locales import Locale, StatusPosition

logger = logging.getLogger(__name__)

# Longer inputs are not street names; they never produce a comparable form
MAX_NAME_LENGTH = 256

# Characters removed outright rather than turned into a word break
_JOINERS = frozenset("'’ʼ`´")

_RE_HYPHEN = re.compile(r"\s*-\s*")
_RE_SPACES = re.compile(r"\s+")


class StreetNameNormalizer(Normalizer):
    """
    Normalizes street names to their comparison key.

    Handles:
    - Case folding and locale letter folding (ё → е, diacritics in English)
    - Punctuation removal (St. → st, O'Connell → oconnell)
    - Whitespace and hyphen standardization
    - Status part abbreviations (St → street, ул → улица)
    - Status part placement (Street Main → main street)

    Two strings normalizing to the same key are the same street.
    """

    def __init__(self, locale: Locale, strip_status: bool = False, max_length: int = MAX_NAME_LENGTH):
        """
        Initialize street name normalizer.

        Args:
            locale: Locale providing the folding rules and status parts
            strip_status: If True, drop the status part from the key entirely
            max_length: Inputs longer than this normalize to an empty key
        """
        self.locale = locale
        self.strip_status = strip_status
        self.max_length = max_length

    def normalize(self, value: str, context: Optional[str] = None) -> str:
        """
        Normalize a single street name.

        Args:
            value: Street name to normalize
            context: Unused (kept for interface compatibility)

        Returns:
            Normalized key, or "" when the value has no comparable form
        """
        if not value or not isinstance(value, str):
            return ""

        if len(value) > self.max_length:
            logger.debug(f"Ignoring overlong name ({len(value)} chars)")
            return ""

        tokens = self.tokenize(value)
        if not tokens:
            return ""

        # Names without a single letter of the locale's script are not comparable
        if not any(self.locale.in_alphabet(ch) for token in tokens for ch in token):
            return ""

        rest, status = self.split_status(tokens)
        if status is None:
            return " ".join(rest)
        if self.strip_status:
            return " ".join(rest)
        if self.locale.STATUS_POSITION is StatusPosition.PREFIX:
            return " ".join([status, *rest])
        return " ".join([*rest, status])

    def tokenize(self, value: str) -> List[str]:
        """Fold ``value`` and split it into words."""
        t = self.locale.fold(value)

        chars = []
        for ch in t:
            if ch in _JOINERS:
                continue
            if self.locale.is_letter(ch) or ch.isdigit() or ch == "-":
                chars.append(ch)
            else:
                chars.append(" ")
        t = "".join(chars)

        # "пр - т" → "пр-т"
        t = _RE_HYPHEN.sub("-", t)
        t = _RE_SPACES.sub(" ", t).strip()

        return [token for token in (tok.strip("-") for tok in t.split(" ")) if token]

    def split_status(self, tokens: List[str]) -> tuple[List[str], Optional[str]]:
        """
        Detach the status part from either end of ``tokens``.

        The preferred end (per the locale's STATUS_POSITION) is checked first.
        A name consisting of a status word alone keeps it as its name.

        Returns:
            Tuple of (remaining tokens, full status form or None)
        """
        if len(tokens) < 2:
            return list(tokens), None

        if self.locale.STATUS_POSITION is StatusPosition.PREFIX:
            ends = (0, len(tokens) - 1)
        else:
            ends = (len(tokens) - 1, 0)

        for rank, idx in enumerate(ends):
            allow_abbreviation = rank == 0 or self.locale.FLEXIBLE_STATUS_ORDER
            status = self.locale.status_of(tokens[idx], allow_abbreviation=allow_abbreviation)
            if status is not None:
                return tokens[:idx] + tokens[idx + 1:], status

        return list(tokens), None
