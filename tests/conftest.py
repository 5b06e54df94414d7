from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


from st_namecheck.database import StreetDatabase


@pytest.fixture
def small_db():
    db = StreetDatabase("en_US")
    db.load(["Main Street", "Oak Avenue"])
    return db


@pytest.fixture
def en_db():
    db = StreetDatabase("en_US")
    db.load([
        "# test dictionary",
        "Main Street | Main Str | Mane Street",
        "",
        "Oak Avenue",
        "Elm Street",
        "Bash Street",
        "Bath Street",
        "Saint-Denis Road",
    ])
    return db


@pytest.fixture
def ru_db():
    db = StreetDatabase("ru_RU")
    db.load([
        "улица Ленина | Ленина улица",
        "Ленинский проспект",
        "Ёлочная улица",
    ])
    return db
