from __future__ import annotations

from typing import Iterable


class StreetNameError(Exception):
    """Base class for errors raised by st_namecheck."""


class LoadError(StreetNameError):
    """A street names dictionary could not be loaded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load dictionary '{source}': {reason}")


class DictionaryReadError(LoadError):
    """The dictionary source could not be read (I/O or decoding failure)."""


class DictionaryFormatError(LoadError):
    """A dictionary line is structurally invalid."""

    def __init__(self, source: str, line_no: int, line: str, reason: str):
        self.line_no = line_no
        self.line = line
        super().__init__(source, f"line {line_no}: {reason}")

    def summary(self) -> str:
        """Human-readable description of the offending line."""
        return f"{self.source}:{self.line_no}: {self.reason}\n    {self.line!r}"


class InputSourceError(StreetNameError):
    """An extraction adapter could not read its input."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to process input '{source}': {reason}")


class UnknownLocaleError(StreetNameError, ValueError):
    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        super().__init__(f"Unknown locale '{name}'. Known locales: {self.known}")
