"""
Abstract base classes for the street name checker.

These define the interfaces that all concrete implementations must follow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .aggregator import NameAggregator


class Normalizer(ABC):
    """
    Abstract base for string normalizers.

    Normalizers are responsible for transforming input strings into
    a comparable form (e.g., "Main St." → "main street").
    """

    @abstractmethod
    def normalize(self, value: str, context: Optional[str] = None) -> str:
        """
        Normalize a string value.

        Args:
            value: String to normalize
            context: Optional context (e.g., source the value came from)

        Returns:
            Normalized string, empty when no comparable form exists
        """
        pass

    def normalize_batch(self, values: List[str]) -> List[str]:
        """
        Normalize multiple values. Default implementation calls normalize()
        for each value, but subclasses can override for efficiency.
        """
        return [self.normalize(v) for v in values]


class DumpBackend(ABC):
    """
    Abstract base for dump writers.

    Dump backends render the per-street groupings collected by a
    NameAggregator into one or more files inside a directory.
    """

    @abstractmethod
    def write(self, aggregator: 'NameAggregator', outdir: Path) -> List[Path]:
        """
        Write the dump for ``aggregator`` into ``outdir``.

        Returns:
            Paths of the files written
        """
        pass
