"""Command line interface: check street names in OSM extracts or text lists."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from pathlib import Path
from typing import Optional, Sequence

from colorama import Fore, Style

from .aggregator import NameAggregator
from .database import StreetDatabase
from .settings import settings
from .sources import DEFAULT_ADDR_TAGS, DEFAULT_NAME_TAGS, NameSource
from .storage import get_backend
from .utils.errors import DictionaryFormatError, InputSourceError, LoadError, UnknownLocaleError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INPUT_ERRORS = 2


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number < 0:
        raise ArgumentTypeError("must be >= 0")
    return number


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="st-namecheck",
        description="Check street names against a dictionary of known streets.",
    )
    parser.add_argument('inputs', nargs='+', metavar='file.osm|file.txt|-',
                        help="OSM XML or name list to check; '-' reads OSM data from stdin")
    parser.add_argument('--per-street', '-s', action='store_true', dest='per_street_stats',
                        help="display per-street statistics (takes extra time)")
    parser.add_argument('--dump', '-d', action='store_true',
                        help="dump street lists into dump.* files")
    parser.add_argument('--count-names', '-c', action='store_true',
                        help="include name counts in dumps")
    parser.add_argument('--locale', '-l', default=settings.locale,
                        help=f"set locale (default {settings.locale!r})")
    parser.add_argument('--spell-distance', '-p', type=_non_negative_int, default=settings.spell_distance,
                        help=f"spelling check distance (default {settings.spell_distance})")
    parser.add_argument('--database', '-f', action='append', type=Path, dest='databases',
                        help="street names database (may be given more than once)")
    parser.add_argument('--addr-tag', '-a', action='append', dest='addr_tags',
                        help="addr tag(s) to use instead of the default addrN:streetN set")
    parser.add_argument('--name-tag', '-n', action='append', dest='name_tags',
                        help="name tag(s) to use instead of the default set ('name')")
    parser.add_argument('--no-addr-tags', '-A', action='store_true',
                        help="don't use the default addr tags set")
    parser.add_argument('--no-name-tags', '-N', action='store_true',
                        help="don't use the default name tags set")
    parser.add_argument('--outdir', '-o', type=Path, default=settings.dump_dir,
                        help="directory for dump files")
    parser.add_argument('--format', default=settings.dump_format, dest='dump_format',
                        help="dump format: text, csv, duckdb (comma separated for several)")
    parser.add_argument('--jobs', '-j', type=int, default=1,
                        help="worker threads used for matching")
    parser.add_argument('--progress', action='store_true',
                        help="show a progress bar while matching")
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser


def _status(step: str, ok: bool, error: Optional[BaseException] = None) -> None:
    """Print a coloured status line for a processing step."""
    if ok:
        print(f'{step} --> {Fore.GREEN}Complete{Style.RESET_ALL}', file=sys.stderr)
    else:
        print(f'{step} --> {Fore.RED}Failed{Style.RESET_ALL}: {error}', file=sys.stderr)


def load_database(args: Namespace) -> StreetDatabase:
    """
    Load every dictionary given on the command line.

    Raises:
        LoadError: A dictionary cannot be loaded
        UnknownLocaleError: The locale is not known
    """
    database = StreetDatabase(args.locale, spell_distance=args.spell_distance)
    for path in args.databases or settings.databases:
        step = f'Loading database "{path}"'
        try:
            database.load(path)
        except LoadError as e:
            _status(step, False, e)
            if isinstance(e, DictionaryFormatError):
                print(e.summary(), file=sys.stderr)
            raise
        _status(step, True)
    return database


def run(args: Namespace) -> int:
    try:
        database = load_database(args)
    except (LoadError, UnknownLocaleError) as e:
        logger.error(str(e))
        return EXIT_FAILURE

    addr_tags = args.addr_tags or ([] if args.no_addr_tags else list(DEFAULT_ADDR_TAGS))
    name_tags = args.name_tags or ([] if args.no_name_tags else list(DEFAULT_NAME_TAGS))

    aggregator = NameAggregator(
        database,
        per_street_stats=args.per_street_stats or args.dump,
        count_names=args.count_names,
        spell_distance=args.spell_distance,
    )

    failed: list[str] = []
    for path in args.inputs:
        step = f'Processing "{path}"'
        try:
            source = NameSource.for_path(path, addr_tags=addr_tags, name_tags=name_tags)
            count = aggregator.process_names(
                source.iter_names(),
                source=source.label,
                n_workers=args.jobs,
                show_progress=args.progress,
            )
        except InputSourceError as e:
            _status(step, False, e)
            failed.append(str(path))
            continue
        logger.info(f"{count} names from {source.label}")
        _status(step, True)

    if args.dump:
        aggregator.dump_data(args.outdir, fmt=args.dump_format)

    aggregator.dump_stats(sys.stdout, per_street=args.per_street_stats)

    if failed:
        logger.warning(f"{len(failed)} input(s) failed: {', '.join(failed)}")
        return EXIT_INPUT_ERRORS
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.jobs < 1:
        parser.error("--jobs must be >= 1")
    try:
        get_backend(args.dump_format)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
