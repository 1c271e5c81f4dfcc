"""Table rendering and side-channel warnings for a comparison run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .compare import passes_filter, to_row
from .config import CompareConfig
from .models import BenchmarkRecord, PairedBenchmarks

logger = logging.getLogger(__name__)

BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"

# name, old, new are left-aligned; diff, diff %, speedup are right-aligned
RIGHT_ALIGNED = (False, False, False, True, True, True)
NOT_AVAILABLE = "n/a"


@dataclass
class Row:
    cells: Tuple[str, ...]
    color: str = ""


def header_row(name_old: str, name_new: str) -> Row:
    return Row(
        cells=(
            "name",
            f"{name_old} ns/iter",
            f"{name_new} ns/iter",
            "diff ns/iter",
            "diff %",
            "speedup",
        ),
        color=BOLD,
    )


def missing_row(record: BenchmarkRecord, show_variance: bool, in_old: bool) -> Row:
    measurement = record.fmt_ns(show_variance)
    old_cell, new_cell = (measurement, NOT_AVAILABLE) if in_old else (NOT_AVAILABLE, measurement)
    return Row(cells=(record.name, old_cell, new_cell, NOT_AVAILABLE, NOT_AVAILABLE, NOT_AVAILABLE))


def build_rows(benches: PairedBenchmarks, config: CompareConfig) -> List[Row]:
    """Filtered comparison rows, then unpaired rows when requested."""
    rows: List[Row] = []
    for comparison in benches.comparisons:
        if not passes_filter(comparison, config.threshold, config.show):
            continue
        color = ""
        if comparison.regression:
            color = RED
        elif comparison.improvement:
            color = GREEN
        rows.append(Row(cells=to_row(comparison, config.show_variance), color=color))

    if config.include_missing:
        for record in benches.missing_in_new:
            rows.append(missing_row(record, config.show_variance, in_old=True))
        for record in benches.missing_in_old:
            rows.append(missing_row(record, config.show_variance, in_old=False))
    return rows


def render_table(rows: Sequence[Row], color: bool) -> str:
    widths = [0] * len(RIGHT_ALIGNED)
    for row in rows:
        for idx, cell in enumerate(row.cells):
            widths[idx] = max(widths[idx], len(cell))

    lines: List[str] = []
    for row in rows:
        cells = [
            cell.rjust(widths[idx]) if RIGHT_ALIGNED[idx] else cell.ljust(widths[idx])
            for idx, cell in enumerate(row.cells)
        ]
        line = "  ".join(cells).rstrip()
        if color and row.color:
            line = f"{row.color}{line}{RESET}"
        lines.append(line)
    return "\n".join(lines)


def _names(records: Sequence[BenchmarkRecord]) -> str:
    return ", ".join(record.name for record in records)


def _failure_names(pairs: Sequence[Tuple[BenchmarkRecord, BenchmarkRecord]]) -> str:
    parts: List[str] = []
    for old, new in pairs:
        failed = new if new.failed else old
        message = failed.failure_message
        parts.append(f"{failed.name} ({message})" if message else failed.name)
    return ", ".join(parts)


def warn_unpaired(benches: PairedBenchmarks, config: CompareConfig) -> None:
    if config.include_missing:
        return
    if benches.missing_in_new:
        logger.warning("benchmarks in old but not in new: %s", _names(benches.missing_in_new))
    if benches.missing_in_old:
        logger.warning("benchmarks in new but not in old: %s", _names(benches.missing_in_old))


def warn_failures(benches: PairedBenchmarks) -> None:
    if benches.failures:
        logger.warning("benchmarks failing in new: %s", _failure_names(benches.failures))
    if benches.recoveries:
        logger.warning(
            "benchmarks recovered in new: %s",
            ", ".join(new.name for _, new in benches.recoveries),
        )
    if benches.still_failing:
        logger.warning("benchmarks failing in both: %s", _failure_names(benches.still_failing))
