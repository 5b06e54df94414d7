"""
Dump backends for aggregated street name data.

Implements plain text, CSV and DuckDB dumps of the per-street groupings
collected by a NameAggregator.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

import duckdb

from .base import DumpBackend

if TYPE_CHECKING:
    from .aggregator import NameAggregator


logger = logging.getLogger(__name__)


def _format_name(name: str, count: Optional[int]) -> str:
    return f"{count}\t{name}" if count is not None else name


class TextDumpBackend(DumpBackend):
    """
    Plain text dumps.

    Writes three files:
    - dump.streets.txt: every matched street followed by the names that
      matched it, one per line and indented with a tab
    - dump.unmatched.txt: names without any suggestion
    - dump.ambiguous.txt: names with several equally close suggestions

    With name counting enabled every name is prefixed by its count.
    """

    STREETS_FILE = "dump.streets.txt"
    UNMATCHED_FILE = "dump.unmatched.txt"
    AMBIGUOUS_FILE = "dump.ambiguous.txt"

    def write(self, aggregator: 'NameAggregator', outdir: Path) -> List[Path]:
        outdir = Path(outdir)

        streets_path = outdir / self.STREETS_FILE
        with streets_path.open("w", encoding="utf-8") as fh:
            for street, names in aggregator.iter_street_names():
                fh.write(f"{street.entry.text}\n")
                for name, count in names:
                    fh.write(f"\t{_format_name(name, count)}\n")

        unmatched_path = outdir / self.UNMATCHED_FILE
        with unmatched_path.open("w", encoding="utf-8") as fh:
            for name, count in aggregator.unmatched_names():
                fh.write(f"{_format_name(name, count)}\n")

        ambiguous_path = outdir / self.AMBIGUOUS_FILE
        with ambiguous_path.open("w", encoding="utf-8") as fh:
            for name, count, suggestions in aggregator.ambiguous_names():
                fh.write(f"{_format_name(name, count)}\t{'; '.join(suggestions)}\n")

        logger.info(f"Wrote text dumps to {outdir}")
        return [streets_path, unmatched_path, ambiguous_path]


class CSVDumpBackend(DumpBackend):
    """
    CSV dump of the flattened groupings.

    One row per (street, candidate) pair plus rows for unmatched and
    ambiguous names; see NameAggregator.to_frame for the columns.
    """

    FILE = "dump.csv"

    def write(self, aggregator: 'NameAggregator', outdir: Path) -> List[Path]:
        csv_path = Path(outdir) / self.FILE
        df = aggregator.to_frame()
        df.to_csv(csv_path, index=False)
        logger.info(f"Wrote {len(df)} rows to {csv_path}")
        return [csv_path]


class DuckDBDumpBackend(DumpBackend):
    """
    DuckDB dump of the flattened groupings.

    Replaces the ``name_matches`` table of ``dump.duckdb`` on every write,
    so repeated dumps leave identical content.
    """

    FILE = "dump.duckdb"
    TABLE = "name_matches"

    def write(self, aggregator: 'NameAggregator', outdir: Path) -> List[Path]:
        db_path = Path(outdir) / self.FILE
        df = aggregator.to_frame()

        con = duckdb.connect(str(db_path))
        try:
            con.register("_tmp_matches", df)
            try:
                con.execute(f"DROP TABLE IF EXISTS {self.TABLE};")
                con.execute(f"CREATE TABLE {self.TABLE} AS SELECT * FROM _tmp_matches;")
            finally:
                con.unregister("_tmp_matches")
        finally:
            con.close()

        logger.info(f"Saved {len(df)} rows to {db_path}:{self.TABLE}")
        return [db_path]


class CompositeDumpBackend(DumpBackend):
    """
    Composite backend that writes through several backends.

    Useful for producing text and CSV dumps in one go.
    """

    def __init__(self, backends: List[DumpBackend]):
        self.backends = backends

    def write(self, aggregator: 'NameAggregator', outdir: Path) -> List[Path]:
        paths: List[Path] = []
        for backend in self.backends:
            paths.extend(backend.write(aggregator, outdir))
        return paths


BACKENDS: dict[str, type[DumpBackend]] = {
    "text": TextDumpBackend,
    "csv": CSVDumpBackend,
    "duckdb": DuckDBDumpBackend,
}


def get_backend(fmt: str) -> DumpBackend:
    """
    Return the backend for ``fmt``.

    Several formats may be combined with commas ('text,csv').
    """
    keys = [part.strip().lower() for part in str(fmt).split(",") if part.strip()]
    unknown = [key for key in keys if key not in BACKENDS]
    if not keys or unknown:
        raise ValueError(f"Unknown dump format '{fmt}'. Known formats: {sorted(BACKENDS)}")
    if len(keys) == 1:
        return BACKENDS[keys[0]]()
    return CompositeDumpBackend([BACKENDS[key]() for key in keys])
