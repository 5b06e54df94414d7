"""
- Locales: Alphabet, case folding and street type words per locale
- Normalizers: Street name canonicalization
- Database: Canonical street names with exact and approximate lookup
- Aggregator: Streaming classification and statistics
- Storage: Text, CSV and DuckDB dumps
- Sources: Candidate names from OSM XML and text lists
"""

from .models import (
    MatchKind,
    CanonicalStreetName,
    CandidateName,
    MatchResult,
    StreetStats,
    AggregateStats,
)

from .base import (
    Normalizer,
    DumpBackend,
)

from .locales import (
    Locale,
    EnglishLocale,
    RussianLocale,
    StatusPart,
    StatusPosition,
)

from .normalizers import (
    StreetNameNormalizer,
)

from .database import (
    StreetDatabase,
)

from .aggregator import (
    AggregatorConfig,
    NameAggregator,
)

from .storage import (
    TextDumpBackend,
    CSVDumpBackend,
    DuckDBDumpBackend,
    CompositeDumpBackend,
    get_backend,
)

from .sources import (
    NameSource,
    TextListSource,
    OsmNameSource,
    DEFAULT_ADDR_TAGS,
    DEFAULT_NAME_TAGS,
)

from .utils.errors import (
    StreetNameError,
    LoadError,
    DictionaryReadError,
    DictionaryFormatError,
    InputSourceError,
    UnknownLocaleError,
)

__all__ = [
    # Models
    "MatchKind",
    "CanonicalStreetName",
    "CandidateName",
    "MatchResult",
    "StreetStats",
    "AggregateStats",
    # Base classes
    "Normalizer",
    "DumpBackend",
    # Locales
    "Locale",
    "EnglishLocale",
    "RussianLocale",
    "StatusPart",
    "StatusPosition",
    # Normalizers
    "StreetNameNormalizer",
    # Database
    "StreetDatabase",
    # Aggregation
    "AggregatorConfig",
    "NameAggregator",
    # Storage
    "TextDumpBackend",
    "CSVDumpBackend",
    "DuckDBDumpBackend",
    "CompositeDumpBackend",
    "get_backend",
    # Sources
    "NameSource",
    "TextListSource",
    "OsmNameSource",
    "DEFAULT_ADDR_TAGS",
    "DEFAULT_NAME_TAGS",
    # Errors
    "StreetNameError",
    "LoadError",
    "DictionaryReadError",
    "DictionaryFormatError",
    "InputSourceError",
    "UnknownLocaleError",
]
