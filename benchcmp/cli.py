"""CLI orchestration for comparing two libtest benchmark reports."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .compare import pair_benchmarks
from .config import CompareConfig, When, build_config
from .errors import BenchcmpError
from .io_utils import STDIN_MARKER, column_names, read_lines
from .models import BenchmarkRecord
from .normalize import apply_rule, rule_for, split_by_prefix
from .parser import parse_lines
from .report import build_rows, header_row, render_table, warn_failures, warn_unpaired

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Compares Rust micro-benchmark results.

The first form takes two files and compares the common benchmarks.

The second form takes two benchmark name prefixes and one benchmark output
file, and compares the common benchmarks (as determined by comparing the
benchmark names with their prefixes stripped). Benchmarks not matching either
prefix are ignored completely. Pass - as the file to read standard input.
"""


def non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchcmp",
        usage="%(prog)s [options] <old> <new> [<file>]",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("old", help="old report file, or old name prefix when <file> is given")
    parser.add_argument("new", help="new report file, or new name prefix when <file> is given")
    parser.add_argument("file", nargs="?", help="single report holding both runs (- for stdin)")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--include-missing",
        action="store_true",
        help="show all benchmarks even if they were not in both runs (warns otherwise)",
    )
    parser.add_argument(
        "--threshold",
        type=non_negative_int,
        default=None,
        metavar="N",
        help="show only comparisons with a percentage change of at least N",
    )
    parser.add_argument("--variance", action="store_true", help="show the variance of each benchmark")
    show = parser.add_mutually_exclusive_group()
    show.add_argument("--improvements", action="store_true", help="show only improvements")
    show.add_argument("--regressions", action="store_true", help="show only regressions")
    parser.add_argument("--strip-old", default=None, metavar="REGEX", help="remove first match from old names")
    parser.add_argument("--strip-new", default=None, metavar="REGEX", help="remove first match from new names")
    parser.add_argument(
        "--color",
        choices=[when.value for when in When],
        default=When.AUTO.value,
        help="show colored rows (default: auto)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug details to stderr")
    return parser


def config_from_args(args: argparse.Namespace) -> CompareConfig:
    split = args.file is not None
    return build_config(
        threshold=args.threshold,
        show_variance=args.variance,
        improvements=args.improvements,
        regressions=args.regressions,
        strip_old=args.strip_old,
        strip_new=args.strip_new,
        old_prefix=args.old if split else None,
        new_prefix=args.new if split else None,
        include_missing=args.include_missing,
        color=args.color,
    )


def load_benchmarks(
    args: argparse.Namespace,
    config: CompareConfig,
) -> Tuple[List[BenchmarkRecord], List[BenchmarkRecord]]:
    if config.split_mode:
        records = parse_lines(read_lines(args.file))
        old, new = split_by_prefix(records, config.old_prefix, config.new_prefix)
    else:
        # Read both inputs before parsing so an unreadable file aborts early.
        old_lines = read_lines(args.old)
        new_lines = read_lines(args.new)
        old, new = parse_lines(old_lines), parse_lines(new_lines)
    old = apply_rule(old, rule_for(config.strip_old))
    new = apply_rule(new, rule_for(config.strip_new))
    logger.debug("loaded %d old and %d new benchmarks", len(old), len(new))
    return old, new


def use_color(when: When) -> bool:
    if when is When.ALWAYS:
        return True
    if when is When.NEVER:
        return False
    return sys.stdout.isatty()


def run(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    old, new = load_benchmarks(args, config)
    benches = pair_benchmarks(old, new)

    name_old, name_new = column_names(args.old, args.new)
    rows = build_rows(benches, config)
    if rows:
        table = render_table([header_row(name_old, name_new)] + rows, use_color(config.color))
        print(table)
    else:
        logger.warning("nothing to output")

    warn_unpaired(benches, config)
    warn_failures(benches)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.file is None and args.old == STDIN_MARKER and args.new == STDIN_MARKER:
        parser.error("standard input (-) can be read for only one of <old> and <new>")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return run(args)
    except BenchcmpError as err:
        logger.error("%s", err)
        return 1
