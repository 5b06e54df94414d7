from __future__ import annotations

import pytest

from st_namecheck.locales import EnglishLocale, RussianLocale
from st_namecheck.normalizers import MAX_NAME_LENGTH, StreetNameNormalizer


@pytest.fixture
def en():
    return StreetNameNormalizer(EnglishLocale())


@pytest.fixture
def ru():
    return StreetNameNormalizer(RussianLocale())


@pytest.mark.parametrize("raw", [
    "Main Street",
    "main street",
    "  MAIN   STREET ",
    "Main St.",
    "Main st",
    "Main, Street",
    "Street Main",
])
def test_english_variants_share_a_key(en, raw):
    assert en.normalize(raw) == "main street"


def test_abbreviation_only_expanded_at_preferred_end(en):
    # "St John" is a saint, not a street
    assert en.normalize("St John") == "st john"
    assert en.normalize("St John St") == "st john street"


def test_apostrophes_are_dropped(en):
    assert en.normalize("O'Connell Street") == "oconnell street"
    assert en.normalize("O’Connell Street") == "oconnell street"


def test_hyphens_are_standardized(en):
    assert en.normalize("Saint - Denis Road") == "saint-denis road"
    assert en.normalize("Saint-Denis  Rd") == "saint-denis road"
    assert en.normalize("- Main Street -") == "main street"


def test_diacritics_are_folded(en):
    assert en.normalize("Café Road") == en.normalize("Cafe Road")


def test_bare_status_word_is_a_name(en):
    assert en.normalize("Street") == "street"
    assert en.normalize("St") == "st"


@pytest.mark.parametrize("raw", ["", None, "   ", "12345", "...", "x" * (MAX_NAME_LENGTH + 1)])
def test_no_comparable_form(en, raw):
    assert en.normalize(raw) == ""


def test_digits_are_kept(en):
    assert en.normalize("42nd Street") == "42nd street"


def test_strip_status():
    normalizer = StreetNameNormalizer(EnglishLocale(), strip_status=True)

    assert normalizer.normalize("Main Avenue") == "main"
    assert normalizer.normalize("Main Ave") == "main"
    assert normalizer.normalize("Avenue") == "avenue"


@pytest.mark.parametrize("raw", [
    "улица Ленина",
    "Ленина улица",
    "ул. Ленина",
    "Ленина ул",
    "УЛИЦА  ЛЕНИНА",
])
def test_russian_status_at_either_end(ru, raw):
    assert ru.normalize(raw) == "улица ленина"


def test_russian_abbreviations(ru):
    assert ru.normalize("Ленинский пр-т") == "проспект ленинский"
    assert ru.normalize("Ленинский пр - т") == "проспект ленинский"
    assert ru.normalize("Ёлочная улица") == "улица елочная"


def test_russian_requires_cyrillic(ru):
    assert ru.normalize("Lenina street") == ""


def test_normalize_batch(en):
    assert en.normalize_batch(["Oak Ave", "oak avenue"]) == ["oak avenue", "oak avenue"]
