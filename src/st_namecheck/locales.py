"""
Locale definitions used to canonicalize street names.

A locale knows which characters form its alphabet, how to fold case and
letter variants, and which street type words ("status parts" such as
"street" or "улица") may appear at either end of a name.
"""

from __future__ import annotations

import logging
import string
import unicodedata
from abc import ABC
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Type

from .utils.errors import UnknownLocaleError

logger = logging.getLogger(__name__)


class StatusPosition(StrEnum):
    """Where the status part is placed in a normalized name."""
    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class StatusPart:
    """A street type word and the abbreviations it is written with."""
    full: str
    abbreviations: tuple[str, ...] = ()

    def forms(self) -> tuple[str, ...]:
        return (self.full, *self.abbreviations)


class Locale(ABC):
    """Abstract base for locales.

    Subclasses set NAME (and optionally ALIASES) and are registered
    automatically, so ``Locale.from_name('ru_RU')`` returns an instance of
    the matching class.

    Usage:
        locale = Locale.from_name('en_US')
        locale.fold('Ärzte STREET')   # 'arzte street'
        locale.status_of('st')        # 'street'
    """

    NAME: ClassVar[str]
    ALIASES: ClassVar[tuple[str, ...]] = ()

    # Lower-case letters of the locale's script
    ALPHABET: ClassVar[frozenset[str]] = frozenset()

    STATUS_PARTS: ClassVar[tuple[StatusPart, ...]] = ()
    STATUS_POSITION: ClassVar[StatusPosition] = StatusPosition.SUFFIX

    # When False, abbreviations are only recognized at the preferred end of a
    # name and the opposite end needs the full form ("St John" is a saint).
    FLEXIBLE_STATUS_ORDER: ClassVar[bool] = False

    _REGISTRY: ClassVar[dict[str, Type['Locale']]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Only register classes that define NAME themselves
        if "NAME" in cls.__dict__:
            for name in (cls.NAME, *cls.ALIASES):
                key = cls._key(name)
                if key in Locale._REGISTRY and Locale._REGISTRY[key] is not cls:
                    raise RuntimeError(f"Duplicate locale name '{key}' for {cls.__name__}")
                Locale._REGISTRY[key] = cls
                logger.debug(f"Registered Locale: {cls.__name__} as '{key}'")

    def __init__(self) -> None:
        self._full_forms: dict[str, str] = {}
        self._abbreviations: dict[str, str] = {}
        for part in self.STATUS_PARTS:
            full = self.fold(part.full)
            self._full_forms[full] = full
            for abbrev in part.abbreviations:
                self._abbreviations[self.fold(abbrev)] = full

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.NAME!r})"

    @staticmethod
    def _key(name: str) -> str:
        return str(name).strip().lower().replace("-", "_")

    @classmethod
    def from_name(cls, name: str) -> 'Locale':
        """Instantiate the locale registered under ``name``.

        Falls back on the language code when no exact entry exists: 'en_CA'
        resolves to the 'en' locale and a bare 'de' to the first registered
        'de_*' locale.
        """
        key = cls._key(name)
        language = key.split("_")[0]
        locale_cls = cls._REGISTRY.get(key)
        if locale_cls is None:
            locale_cls = cls._REGISTRY.get(language)
        if locale_cls is None:
            matches = sorted(k for k in cls._REGISTRY if k.split("_")[0] == language)
            if matches:
                locale_cls = cls._REGISTRY[matches[0]]
        if locale_cls is None:
            raise UnknownLocaleError(name, cls._REGISTRY.keys())
        return locale_cls()

    @classmethod
    def known_locales(cls) -> list[str]:
        return sorted(cls._REGISTRY.keys())

    @property
    def name(self) -> str:
        return self.NAME

    # --- Character classification --------------------------------------

    def is_letter(self, ch: str) -> bool:
        return ch.isalpha()

    def in_alphabet(self, ch: str) -> bool:
        return ch.lower() in self.ALPHABET

    # --- Folding ----------------------------------------------------------

    def fold_case(self, text: str) -> str:
        return text.casefold()

    def fold_letters(self, text: str) -> str:
        """Map letter variants to the form used for comparison."""
        return text

    def fold(self, text: str) -> str:
        return self.fold_letters(self.fold_case(unicodedata.normalize("NFC", text)))

    # --- Status parts ------------------------------------------------------

    def status_of(self, token: str, allow_abbreviation: bool = True) -> str | None:
        """Return the folded full status form for a folded token, if any."""
        full = self._full_forms.get(token)
        if full is None and allow_abbreviation:
            full = self._abbreviations.get(token)
        return full


class EnglishLocale(Locale):
    NAME = "en_US"
    ALIASES = ("en", "en_gb")

    ALPHABET = frozenset(string.ascii_lowercase)

    STATUS_POSITION = StatusPosition.SUFFIX

    STATUS_PARTS = (
        StatusPart("street", ("st", "str")),
        StatusPart("avenue", ("ave", "av")),
        StatusPart("road", ("rd",)),
        StatusPart("boulevard", ("blvd",)),
        StatusPart("lane", ("ln",)),
        StatusPart("drive", ("dr",)),
        StatusPart("court", ("ct",)),
        StatusPart("place", ("pl",)),
        StatusPart("square", ("sq",)),
        StatusPart("terrace", ("ter", "terr")),
        StatusPart("parkway", ("pkwy",)),
        StatusPart("highway", ("hwy",)),
        StatusPart("circle", ("cir",)),
        StatusPart("crescent", ("cres",)),
        StatusPart("alley", ("aly",)),
        StatusPart("trail", ("trl",)),
        StatusPart("close"),
        StatusPart("way"),
    )

    def fold_letters(self, text: str) -> str:
        # Drop diacritics: "Café" and "Cafe" compare equal
        decomposed = unicodedata.normalize("NFKD", text)
        return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class RussianLocale(Locale):
    NAME = "ru_RU"
    ALIASES = ("ru",)

    ALPHABET = frozenset("абвгдеёжзийклмнопрстуфхцчшщъыьэюя")

    # "улица Ленина" and "Ленинская улица" are both customary
    STATUS_POSITION = StatusPosition.PREFIX
    FLEXIBLE_STATUS_ORDER = True

    STATUS_PARTS = (
        StatusPart("улица", ("ул",)),
        StatusPart("проспект", ("пр-т", "просп")),
        StatusPart("переулок", ("пер",)),
        StatusPart("площадь", ("пл",)),
        StatusPart("бульвар", ("б-р", "бул")),
        StatusPart("шоссе", ("ш",)),
        StatusPart("набережная", ("наб",)),
        StatusPart("проезд", ("пр-д",)),
        StatusPart("тупик", ("туп",)),
        StatusPart("аллея", ("ал",)),
        StatusPart("линия", ("лин",)),
        StatusPart("микрорайон", ("мкр",)),
        StatusPart("квартал", ("кв-л",)),
        StatusPart("тракт"),
    )

    def fold_letters(self, text: str) -> str:
        return text.replace("ё", "е")
