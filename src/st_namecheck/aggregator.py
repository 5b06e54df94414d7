"""
Streaming aggregation of street name classifications.

NameAggregator feeds candidate names through a StreetDatabase and keeps
global and per-street statistics, which can be rendered as a summary or
dumped to files.
"""

from __future__ import annotations

import io
import logging
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

import pandas as pd
from pydantic import BaseModel, ConfigDict, NonNegativeInt
from tqdm import tqdm

from .database import StreetDatabase
from .models import AggregateStats, CandidateName, MatchKind, MatchResult, StreetStats
from .storage import get_backend

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["street", "street_key", "candidate", "kind", "count", "suggestions"]

# Names submitted to the worker pool per worker and round
CHUNK_FACTOR = 64

# Order of kinds in reports
_REPORT_ORDER = (
    (MatchKind.EXACT, "exact match"),
    (MatchKind.CLOSE, "close match"),
    (MatchKind.AMBIGUOUS, "ambiguous"),
    (MatchKind.UNMATCHED, "no match"),
)


class AggregatorConfig(BaseModel):
    """Options of a NameAggregator."""
    model_config = ConfigDict(frozen=True)

    # Group matches by canonical street (needed for dump_data)
    per_street_stats: bool = False
    # Count occurrences of each distinct candidate instead of listing it once
    count_names: bool = False
    spell_distance: NonNegativeInt = 1


class NameAggregator:
    """
    Classify a stream of candidate names and keep statistics.

    Producers (OSM extraction, text lists) only need to call
    ``process_name`` for every name they find.

    Usage:
        aggregator = NameAggregator(db, per_street_stats=True, count_names=True)
        for name in names:
            aggregator.process_name(name)
        print(aggregator.dump_stats())
        aggregator.dump_data('./out')
    """

    def __init__(self, database: StreetDatabase, config: Optional[AggregatorConfig] = None, **overrides: Any):
        """
        Initialize aggregator.

        Args:
            database: Loaded street database (only read from)
            config: Aggregator options
            **overrides: Individual AggregatorConfig fields, applied over ``config``
        """
        if config is None:
            config = AggregatorConfig(**overrides)
        elif overrides:
            config = AggregatorConfig(**{**config.model_dump(), **overrides})

        self.database = database
        self.config = config
        self._lock = threading.Lock()
        self._stats = AggregateStats(
            unmatched=Counter() if config.count_names else set(),
        )

    @property
    def stats(self) -> AggregateStats:
        return self._stats

    @property
    def per_street_stats(self) -> bool:
        return self.config.per_street_stats

    @property
    def count_names(self) -> bool:
        return self.config.count_names

    # --- Input -------------------------------------------------------------

    def classify(self, name: Optional[str], source: Optional[str] = None) -> MatchResult:
        candidate = CandidateName(text="" if name is None else str(name), source=source)
        return self.database.classify(candidate, spell_distance=self.config.spell_distance)

    def process_name(self, name: Optional[str], source: Optional[str] = None) -> MatchResult:
        """
        Classify one candidate and record the result.

        Args:
            name: Candidate street name; None and "" count as unmatched
            source: Optional tag of the input the name came from

        Returns:
            The MatchResult that was recorded
        """
        result = self.classify(name, source)
        self._record(result)
        return result

    def process_names(
        self,
        names: Iterable[Optional[str]],
        source: Optional[str] = None,
        n_workers: int = 1,
        show_progress: bool = False,
    ) -> int:
        """
        Classify and record many candidates.

        Args:
            names: Iterable of candidate names
            source: Optional tag of the input the names came from
            n_workers: Worker threads used for classification (default: 1)
            show_progress: Whether to show a progress bar (default: False)

        Returns:
            Number of names processed
        """
        if n_workers < 1:
            raise ValueError("n_workers must be >= 1")

        processed = 0
        if n_workers == 1:
            for name in tqdm(names, desc="Checking names", unit="name", disable=not show_progress):
                self.process_name(name, source)
                processed += 1
            return processed

        # Classification only reads the database; recording takes the lock.
        # Input is read in bounded chunks and each chunk is recorded before
        # the next one is read, also when the input fails partway.
        chunk_size = n_workers * CHUNK_FACTOR
        iterator = iter(names)
        with ThreadPoolExecutor(max_workers=n_workers) as executor, \
                tqdm(desc="Checking names", unit="name", disable=not show_progress) as pbar:
            while True:
                chunk: list[Optional[str]] = []
                try:
                    for name in islice(iterator, chunk_size):
                        chunk.append(name)
                finally:
                    for result in executor.map(lambda name: self.classify(name, source), chunk):
                        self._record(result)
                        processed += 1
                    pbar.update(len(chunk))
                if len(chunk) < chunk_size:
                    break
        return processed

    def _record(self, result: MatchResult) -> None:
        stats = self._stats
        text = result.candidate.text

        with self._lock:
            stats.total += 1
            stats.counts[result.kind] += 1
            if result.kind is MatchKind.EXACT and not result.verbatim:
                stats.non_verbatim += 1

            if not self.config.per_street_stats:
                return

            if result.is_match:
                entry = result.entry
                street = stats.streets.get(entry.normalized)
                if street is None:
                    street = StreetStats(entry=entry, names=Counter() if self.config.count_names else set())
                    stats.streets[entry.normalized] = street
                if result.kind is MatchKind.EXACT:
                    street.exact += 1
                else:
                    street.close += 1
                self._add_name(street.names, text)
                street.kinds[text] = result.kind
            elif result.kind is MatchKind.AMBIGUOUS:
                count, _ = stats.ambiguous.get(text, (0, ()))
                stats.ambiguous[text] = (count + 1, result.suggestions)
            else:
                self._add_name(stats.unmatched, text)

    @staticmethod
    def _add_name(names: Counter | set, text: str) -> None:
        if isinstance(names, Counter):
            names[text] += 1
        else:
            names.add(text)

    # --- Output ------------------------------------------------------------

    def dump_stats(self, out: Optional[TextIO] = None, per_street: Optional[bool] = None) -> str:
        """
        Render global counters and, with per-street statistics, one summary
        line per matched street.

        Args:
            out: Optional stream to write the report to
            per_street: Include the per-street lines (default: per_street_stats)

        Returns:
            The report text
        """
        stats = self._stats
        buf = io.StringIO()

        buf.write(f"Total names processed: {stats.total}\n")
        for kind, label in _REPORT_ORDER:
            buf.write(f"  {label + ':':<14}{stats.count(kind):>10} ({_percent(stats.count(kind), stats.total)})\n")
            if kind is MatchKind.EXACT and stats.non_verbatim:
                buf.write(f"    {'non-verbatim:':<12}{stats.non_verbatim:>10}\n")

        if per_street is None:
            per_street = self.config.per_street_stats
        if per_street and self.config.per_street_stats:
            buf.write(f"Per-street statistics ({len(stats.streets)} of {len(self.database)} streets matched):\n")
            for key in sorted(stats.streets):
                street = stats.streets[key]
                buf.write(
                    f"  {street.entry.text}: {street.hits} hits, {len(street.names)} distinct names, "
                    f"{street.exact_ratio * 100:.2f}% exact\n"
                )

        report = buf.getvalue()
        if out is not None:
            out.write(report)
        return report

    def dump_data(self, outdir: Path | str, fmt: str = "text") -> list[Path]:
        """
        Write per-street groupings and unmatched/ambiguous names.

        Args:
            outdir: Directory the dump files are written to
            fmt: Dump backend: 'text', 'csv' or 'duckdb'

        Returns:
            Paths of the files written
        """
        if not self.config.per_street_stats:
            logger.warning("dump_data needs per-street statistics; nothing written")
            return []

        outdir = Path(outdir)
        outdir.mkdir(parents=True, exist_ok=True)
        paths = get_backend(fmt).write(self, outdir)
        logger.info(f"Dumped {len(self._stats.streets)} streets to {outdir} ({fmt})")
        return paths

    def iter_street_names(self) -> Iterable[tuple[StreetStats, list[tuple[str, Optional[int]]]]]:
        """Matched streets ordered by normalized key with their sorted names."""
        for key in sorted(self._stats.streets):
            street = self._stats.streets[key]
            yield street, street.name_counts()

    def unmatched_names(self) -> list[tuple[str, Optional[int]]]:
        unmatched = self._stats.unmatched
        if isinstance(unmatched, Counter):
            return sorted(unmatched.items())
        return [(name, None) for name in sorted(unmatched)]

    def ambiguous_names(self) -> list[tuple[str, Optional[int], tuple[str, ...]]]:
        return [
            (name, count if self.config.count_names else None, suggestions)
            for name, (count, suggestions) in sorted(self._stats.ambiguous.items())
        ]

    def to_frame(self) -> pd.DataFrame:
        """
        Flatten the per-street groupings into a DataFrame.

        Columns: street, street_key, candidate, kind, count, suggestions.
        ``kind`` is the MatchKind value of the candidate (exact or close for
        names grouped under a street); counts are only filled when names are
        counted; suggestions lists the tied spellings of ambiguous names.
        """
        rows = []
        for street, names in self.iter_street_names():
            for name, count in names:
                rows.append((street.entry.text, street.entry.normalized, name, street.kinds[name].value, count, None))
        for name, count, suggestions in self.ambiguous_names():
            rows.append((None, None, name, MatchKind.AMBIGUOUS.value, count, "; ".join(suggestions)))
        for name, count in self.unmatched_names():
            rows.append((None, None, name, MatchKind.UNMATCHED.value, count, None))

        frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
        frame["count"] = frame["count"].astype("Int64")
        return frame


def _percent(part: int, total: int) -> str:
    return f"{part / total * 100:.2f}%" if total else "0.00%"
