from __future__ import annotations

import pytest

from st_namecheck.locales import EnglishLocale, Locale, RussianLocale, StatusPosition
from st_namecheck.utils.errors import UnknownLocaleError


@pytest.fixture(autouse=True)
def reset_registry():
    original_registry = Locale._REGISTRY.copy()
    yield
    Locale._REGISTRY = original_registry


def test_from_name_resolves_identifiers_and_aliases():
    assert isinstance(Locale.from_name("ru_RU"), RussianLocale)
    assert isinstance(Locale.from_name("ru"), RussianLocale)
    assert isinstance(Locale.from_name("en_US"), EnglishLocale)
    assert isinstance(Locale.from_name("EN-us"), EnglishLocale)


def test_from_name_falls_back_to_language_code():
    assert isinstance(Locale.from_name("en_CA"), EnglishLocale)


def test_unknown_locale_raises():
    with pytest.raises(UnknownLocaleError) as excinfo:
        Locale.from_name("xx_XX")

    err = excinfo.value
    assert isinstance(err, ValueError)
    assert err.name == "xx_XX"
    assert "ru_ru" in err.known


def test_subclass_with_name_is_registered():
    class GermanLocale(Locale):
        NAME = "de_DE"
        ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyzäöüß")

    assert isinstance(Locale.from_name("de"), GermanLocale)
    assert isinstance(Locale.from_name("de_AT"), GermanLocale)
    assert "de_de" in Locale.known_locales()


def test_duplicate_locale_name_raises():
    with pytest.raises(RuntimeError):
        class OtherEnglish(Locale):
            NAME = "en_US"


def test_english_folding_drops_case_and_diacritics():
    locale = EnglishLocale()

    assert locale.fold("Café ROAD") == "cafe road"
    assert locale.fold("Ärzte Straße") == "arzte strasse"


def test_russian_folding_merges_yo():
    locale = RussianLocale()

    assert locale.fold("Ёлочная УЛИЦА") == "елочная улица"
    # й is a letter of its own and must survive folding
    assert locale.fold("Майская") == "майская"


def test_alphabet_membership():
    en = EnglishLocale()
    ru = RussianLocale()

    assert en.in_alphabet("a")
    assert en.in_alphabet("Q")
    assert not en.in_alphabet("ж")
    assert ru.in_alphabet("Ж")
    assert not ru.in_alphabet("a")
    assert en.is_letter("ж")
    assert not en.is_letter("1")


def test_status_lookup():
    en = EnglishLocale()
    ru = RussianLocale()

    assert en.status_of("street") == "street"
    assert en.status_of("st") == "street"
    assert en.status_of("st", allow_abbreviation=False) is None
    assert en.status_of("main") is None
    assert ru.status_of("ул") == "улица"
    assert ru.status_of("пр-т") == "проспект"
    assert en.STATUS_POSITION is StatusPosition.SUFFIX
    assert ru.STATUS_POSITION is StatusPosition.PREFIX
