"""
Extraction adapters producing candidate street names.

Every source yields plain strings and feeds them to anything with a
``process_name`` method, normally a NameAggregator.
"""

from __future__ import annotations

import contextlib
import logging
import sys
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, ContextManager, IO, Iterable, Iterator, Protocol, Type

from .utils.errors import InputSourceError

logger = logging.getLogger(__name__)

DEFAULT_ADDR_TAGS: tuple[str, ...] = (
    "addr:street",
    "addr:street1",
    "addr:street2",
    "addr:street3",
    "addr2:street",
    "addr3:street",
)

DEFAULT_NAME_TAGS: tuple[str, ...] = ("name",)

STDIN = "-"


class NameConsumer(Protocol):
    def process_name(self, name: str, source: str | None = None) -> Any: ...


class NameSource(ABC):
    """Abstract base for candidate name sources.

    Subclasses set SOURCE and implement ``iter_names()``; they are registered
    automatically.

    Usage:
        source = NameSource.for_path('extract.osm')
        source.feed(aggregator)

        # Or by key
        source = NameSource.from_source('txt', path='names.txt')
    """

    # Unique key for each subclass (e.g., 'osm', 'txt')
    SOURCE: ClassVar[str]

    # File suffixes handled by the subclass
    SUFFIXES: ClassVar[tuple[str, ...]] = ()

    _REGISTRY: ClassVar[dict[str, Type['NameSource']]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Only register classes that define SOURCE themselves
        if "SOURCE" in cls.__dict__:
            key = str(cls.SOURCE).lower()
            if key in NameSource._REGISTRY and NameSource._REGISTRY[key] is not cls:
                raise RuntimeError(f"Duplicate name source '{key}' for {cls.__name__}")
            NameSource._REGISTRY[key] = cls
            logger.debug(f"Registered NameSource: {cls.__name__} as '{key}'")

    def __init__(self, path: str | Path, *, encoding: str = "utf-8") -> None:
        self.path = path
        self.encoding = encoding

    @property
    def label(self) -> str:
        return "<stdin>" if str(self.path) == STDIN else str(self.path)

    @classmethod
    def from_source(cls, source: str, **kwargs: Any) -> 'NameSource':
        """Instantiate the source registered under ``source``."""
        key = str(source).lower()
        try:
            source_cls = cls._REGISTRY[key]
        except KeyError as e:
            raise ValueError(
                f"Unknown source '{source}'. "
                f"Known sources: {sorted(cls._REGISTRY.keys())}"
            ) from e
        return source_cls(**kwargs)

    @classmethod
    def for_path(cls, path: str | Path, **kwargs: Any) -> 'NameSource':
        """
        Pick the source for ``path`` by its suffix; '-' reads OSM data from stdin.

        Keyword arguments not accepted by the chosen source are dropped, so
        OSM tag options can be passed for any path.

        Raises:
            InputSourceError: The format is not supported
        """
        if str(path) == STDIN:
            return OsmNameSource(path, **kwargs)

        suffix = Path(path).suffix.lower()
        for source_cls in cls._REGISTRY.values():
            if suffix in source_cls.SUFFIXES:
                accepted = source_cls.accepted_options()
                return source_cls(path, **{k: v for k, v in kwargs.items() if k in accepted})

        known = sorted(s for source_cls in cls._REGISTRY.values() for s in source_cls.SUFFIXES)
        raise InputSourceError(str(path), f"unknown format (supported: {', '.join(known)})")

    @classmethod
    def accepted_options(cls) -> set[str]:
        return {"encoding"}

    @abstractmethod
    def iter_names(self) -> Iterator[str]:
        """Yield candidate names.

        Raises:
            InputSourceError: The input cannot be read or parsed
        """
        ...

    def feed(self, consumer: NameConsumer) -> int:
        """Pass every name to ``consumer.process_name``; return how many."""
        count = 0
        for name in self.iter_names():
            consumer.process_name(name, self.label)
            count += 1
        logger.info(f"Processed {count} names from {self.label}")
        return count

    def _open(self) -> ContextManager[IO[str]]:
        if str(self.path) == STDIN:
            return contextlib.nullcontext(sys.stdin)
        return open(self.path, "r", encoding=self.encoding)


class TextListSource(NameSource):
    """
    Line-delimited list of names.

    Surrounding whitespace is trimmed; blank lines and lines starting
    with '#' are skipped.
    """

    SOURCE = "txt"
    SUFFIXES = (".txt",)

    def iter_names(self) -> Iterator[str]:
        try:
            with self._open() as fh:
                for line in fh:
                    name = line.strip()
                    if name and not name.startswith("#"):
                        yield name
        except (OSError, UnicodeDecodeError) as e:
            raise InputSourceError(self.label, str(e)) from e


class OsmNameSource(NameSource):
    """
    Street names from OpenStreetMap XML.

    For every node, way and relation the values of the address tags are
    yielded; the values of the name tags are yielded only for objects
    carrying a ``highway`` tag. The file is streamed, so planet extracts
    of any size can be processed.
    """

    SOURCE = "osm"
    SUFFIXES = (".osm",)

    _OBJECTS = frozenset({"node", "way", "relation"})

    def __init__(
        self,
        path: str | Path,
        *,
        addr_tags: Iterable[str] = DEFAULT_ADDR_TAGS,
        name_tags: Iterable[str] = DEFAULT_NAME_TAGS,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(path, encoding=encoding)
        self.addr_tags = tuple(addr_tags)
        self.name_tags = tuple(name_tags)

    @classmethod
    def accepted_options(cls) -> set[str]:
        return {"encoding", "addr_tags", "name_tags"}

    def iter_names(self) -> Iterator[str]:
        stream = sys.stdin.buffer if str(self.path) == STDIN else self.path
        root = None
        try:
            for event, elem in ET.iterparse(stream, events=("start", "end")):
                if event == "start":
                    if root is None:
                        root = elem
                    continue
                if elem.tag not in self._OBJECTS:
                    continue
                yield from self._names_of(elem)
                # drop finished objects from the tree
                elem.clear()
                root.clear()
        except ET.ParseError as e:
            raise InputSourceError(self.label, f"malformed OSM XML: {e}") from e
        except OSError as e:
            raise InputSourceError(self.label, str(e)) from e

    def _names_of(self, elem: ET.Element) -> Iterator[str]:
        tags = {}
        for tag in elem.iter("tag"):
            key = tag.get("k")
            if key is not None:
                tags[key] = tag.get("v", "")

        for key in self.addr_tags:
            if tags.get(key):
                yield tags[key]

        if "highway" in tags:
            for key in self.name_tags:
                if tags.get(key):
                    yield tags[key]
