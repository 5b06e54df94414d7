"""
Street names database.

Holds the canonical street names of one locale and answers classification
queries: exact match on the normalized key, otherwise the nearest entries
within a bounded optimal string alignment distance.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from rapidfuzz import process
from rapidfuzz.distance import OSA

from .locales import Locale
from .models import CandidateName, CanonicalStreetName, MatchKind, MatchResult
from .normalizers import StreetNameNormalizer
from .utils.errors import DictionaryFormatError, DictionaryReadError

logger = logging.getLogger(__name__)

DictionarySource = Union[str, Path, Iterable[str], Iterable[bytes]]


class StreetDatabase:
    """
    Canonical street names with exact and approximate lookup.

    Dictionary sources list one street per line, the primary spelling
    optionally followed by alternate spellings of the same street:

        Main Street | Main Str | Mainstreet
        # comments and blank lines are skipped
        Oak Avenue

    Every spelling is normalized with the locale rules and indexed; keys of
    alternate spellings resolve to their primary entry. Lines whose primary
    spelling normalizes to a known key are merged into the existing entry.

    Usage:
        db = StreetDatabase('en_US')
        db.load('streets.txt')
        db.classify('Man Street')   # MatchResult(kind=CLOSE, distance=1, ...)
    """

    VARIANT_SEPARATOR = "|"
    COMMENT_PREFIX = "#"

    def __init__(self, locale: Locale | str, spell_distance: int = 1, strip_status: bool = False):
        """
        Initialize an empty database.

        Args:
            locale: Locale instance or identifier (e.g. 'ru_RU')
            spell_distance: Default maximum edit distance for close matches
            strip_status: If True, street type words are dropped from keys
        """
        if isinstance(locale, str):
            locale = Locale.from_name(locale)
        if spell_distance < 0:
            raise ValueError("spell_distance must be >= 0")

        self.locale = locale
        self.spell_distance = int(spell_distance)
        self.normalizer = StreetNameNormalizer(locale, strip_status=strip_status)

        # primary key -> entry
        self._entries: dict[str, CanonicalStreetName] = {}
        # any indexed key (primary or variant) -> primary key
        self._index: dict[str, str] = {}
        # key length -> indexed keys of that length
        self._by_length: dict[int, list[str]] = defaultdict(list)

    @classmethod
    def from_sources(cls, locale: Locale | str, sources: Iterable[DictionarySource], **kwargs) -> 'StreetDatabase':
        """Create a database and load every source into it."""
        db = cls(locale, **kwargs)
        for source in sources:
            db.load(source)
        return db

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = self.normalize(name)
        return bool(key) and key in self._index

    def __iter__(self) -> Iterator[CanonicalStreetName]:
        return iter(self.entries())

    def normalize(self, name: str) -> str:
        return self.normalizer.normalize(name)

    def entries(self) -> list[CanonicalStreetName]:
        """All entries ordered by normalized key."""
        return [self._entries[key] for key in sorted(self._entries)]

    def get(self, name: str) -> Optional[CanonicalStreetName]:
        """Entry an exact match of ``name`` would resolve to, if any."""
        owner = self._index.get(self.normalize(name))
        return self._entries[owner] if owner is not None else None

    # --- Loading -----------------------------------------------------------

    def load(self, source: DictionarySource) -> int:
        """
        Load a dictionary source.

        Args:
            source: Path to a UTF-8 text file, or an iterable of lines

        Returns:
            Number of new canonical entries

        Raises:
            DictionaryReadError: The source cannot be read or decoded
            DictionaryFormatError: A line is malformed; nothing is loaded
        """
        label = self._label(source)

        try:
            if isinstance(source, (str, Path)):
                with Path(source).open("r", encoding="utf-8-sig") as fh:
                    staged = self._parse_lines(fh, label)
            else:
                staged = self._parse_lines(source, label)
        except (OSError, UnicodeDecodeError) as e:
            raise DictionaryReadError(label, str(e)) from e

        before = len(self._entries)
        for forms in staged:
            self._insert(forms, label)
        added = len(self._entries) - before

        logger.info(f"Loaded {len(staged)} names from '{label}' ({added} new, {len(self)} total)")
        return added

    def add_name(self, text: str, variants: Iterable[str] = (), source: Optional[str] = None) -> CanonicalStreetName:
        """
        Add one street with optional alternate spellings.

        Raises:
            DictionaryFormatError: A spelling is empty or not comparable
        """
        label = source or "<api>"
        forms = tuple(str(form).strip() for form in (text, *variants))
        self._check_forms(forms, label, 0, " | ".join(forms))
        owner = self._insert(forms, source)
        return self._entries[owner]

    @staticmethod
    def _label(source: DictionarySource) -> str:
        if isinstance(source, (str, Path)):
            return str(source)
        return str(getattr(source, "name", "<lines>"))

    def _parse_lines(self, lines: Iterable[str] | Iterable[bytes], label: str) -> list[tuple[str, ...]]:
        staged: list[tuple[str, ...]] = []
        for line_no, raw in enumerate(lines, start=1):
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            line = raw.strip().lstrip("\ufeff")
            if not line or line.startswith(self.COMMENT_PREFIX):
                continue

            forms = tuple(part.strip() for part in line.split(self.VARIANT_SEPARATOR))
            self._check_forms(forms, label, line_no, line)
            staged.append(forms)
        return staged

    def _check_forms(self, forms: tuple[str, ...], label: str, line_no: int, line: str) -> None:
        for position, form in enumerate(forms):
            what = "primary name" if position == 0 else f"variant #{position}"
            if not form:
                raise DictionaryFormatError(label, line_no, line, f"empty {what}")
            if not self.normalize(form):
                raise DictionaryFormatError(label, line_no, line, f"{what} '{form}' has no comparable form")

    def _add_key(self, key: str, owner: str) -> None:
        self._index[key] = owner
        self._by_length[len(key)].append(key)

    def _insert(self, forms: tuple[str, ...], source: Optional[str]) -> str:
        primary = forms[0]
        key = self.normalize(primary)

        owner = self._index.get(key)
        if owner is None:
            owner = key
            self._entries[owner] = CanonicalStreetName(text=primary, normalized=key)
            self._add_key(key, owner)

        accepted = [primary]
        for variant in forms[1:]:
            vkey = self.normalize(variant)
            existing = self._index.get(vkey)
            if existing is None:
                self._add_key(vkey, owner)
            elif existing != owner:
                logger.warning(
                    f"Variant '{variant}' of '{self._entries[owner].text}' already names "
                    f"'{self._entries[existing].text}'; keeping the first"
                )
                continue
            accepted.append(variant)

        self._entries[owner] = self._entries[owner].merged(tuple(accepted), source)
        return owner

    # --- Classification ----------------------------------------------------

    def classify(self, candidate: CandidateName | str | None, spell_distance: Optional[int] = None) -> MatchResult:
        """
        Classify a candidate street name.

        Args:
            candidate: Name to check (plain string or CandidateName)
            spell_distance: Maximum edit distance for close matches
                (defaults to the database setting)

        Returns:
            MatchResult of kind EXACT, CLOSE, AMBIGUOUS or UNMATCHED
        """
        if not isinstance(candidate, CandidateName):
            candidate = CandidateName(text="" if candidate is None else str(candidate))

        max_distance = self.spell_distance if spell_distance is None else int(spell_distance)
        if max_distance < 0:
            raise ValueError("spell_distance must be >= 0")

        key = self.normalize(candidate.text)
        if not key:
            return MatchResult(candidate=candidate, kind=MatchKind.UNMATCHED, normalized=key)

        owner = self._index.get(key)
        if owner is not None:
            entry = self._entries[owner]
            return MatchResult(
                candidate=candidate,
                kind=MatchKind.EXACT,
                normalized=key,
                entry=entry,
                distance=0,
                verbatim=candidate.text in entry.forms,
            )

        found = self._search(key, max_distance) if max_distance > 0 else {}
        if not found:
            return MatchResult(candidate=candidate, kind=MatchKind.UNMATCHED, normalized=key)

        best = min(found.values())
        nearest = sorted(owner for owner, distance in found.items() if distance == best)
        if len(nearest) == 1:
            return MatchResult(
                candidate=candidate,
                kind=MatchKind.CLOSE,
                normalized=key,
                entry=self._entries[nearest[0]],
                distance=best,
            )

        return MatchResult(
            candidate=candidate,
            kind=MatchKind.AMBIGUOUS,
            normalized=key,
            distance=best,
            ties=tuple(self._entries[owner] for owner in nearest),
        )

    def _search(self, key: str, max_distance: int) -> dict[str, int]:
        """
        Find entries with an indexed key within ``max_distance`` of ``key``.

        Only keys whose length differs by at most ``max_distance`` can be
        that close, so other length buckets are skipped.

        Returns:
            Mapping of primary key -> smallest distance over its keys
        """
        found: dict[str, int] = {}
        for length in range(max(1, len(key) - max_distance), len(key) + max_distance + 1):
            bucket = self._by_length.get(length)
            if not bucket:
                continue
            for choice, distance, _ in process.extract(
                key, bucket, scorer=OSA.distance, score_cutoff=max_distance, limit=None
            ):
                owner = self._index[choice]
                if owner not in found or distance < found[owner]:
                    found[owner] = int(distance)
        return found
