"""Old/new pair arithmetic, row formatting and output filtering."""

from __future__ import annotations

import math
from operator import attrgetter
from typing import Iterable, Optional, Tuple

from .config import Show
from .formatting import fmt_percent, fmt_signed, fmt_speedup
from .models import BenchmarkRecord, ComparisonRecord, Measured, PairedBenchmarks
from .overlap import find_overlap

by_name = attrgetter("name")


def _ratio(diff_ns: int, old_ns: int) -> float:
    if old_ns == 0:
        # A change from zero has no finite ratio; no change at all has none either.
        return math.inf if diff_ns > 0 else math.nan
    return diff_ns / old_ns


def _speedup(diff_ratio: float) -> float:
    denom = 1.0 + diff_ratio
    if denom == 0.0:
        return math.inf
    return 1.0 / denom


def compare(old: BenchmarkRecord, new: BenchmarkRecord) -> ComparisonRecord:
    """Compare an old measurement with a new one."""
    if not isinstance(old.status, Measured) or not isinstance(new.status, Measured):
        failed = old if old.failed else new
        raise ValueError(f"cannot compare failed benchmark {failed.name!r}")
    diff_ns = new.status.ns - old.status.ns
    diff_ratio = _ratio(diff_ns, old.status.ns)
    return ComparisonRecord(
        old=old,
        new=new,
        diff_ns=diff_ns,
        diff_ratio=diff_ratio,
        speedup=_speedup(diff_ratio),
    )


def to_row(comparison: ComparisonRecord, show_variance: bool) -> Tuple[str, ...]:
    return (
        comparison.name,
        comparison.old.fmt_ns(show_variance),
        comparison.new.fmt_ns(show_variance),
        fmt_signed(comparison.diff_ns),
        fmt_percent(comparison.diff_ratio),
        fmt_speedup(comparison.speedup),
    )


def abs_percent(comparison: ComparisonRecord) -> float:
    """Truncated absolute percentage; ``inf`` stays ``inf`` and NaN counts as 0."""
    percent = abs(comparison.percent)
    if math.isnan(percent):
        return 0.0
    if math.isinf(percent):
        return percent
    return float(math.trunc(percent))


def passes_filter(comparison: ComparisonRecord, threshold: Optional[int], show: Show) -> bool:
    if threshold is not None and abs_percent(comparison) < threshold:
        return False
    if show is Show.IMPROVEMENTS and comparison.regression:
        return False
    if show is Show.REGRESSIONS and comparison.improvement:
        return False
    return True


def pair_benchmarks(old: Iterable[BenchmarkRecord], new: Iterable[BenchmarkRecord]) -> PairedBenchmarks:
    """Sort both sides by name, match them and compare every measured pair."""
    overlap = find_overlap(sorted(old, key=by_name), sorted(new, key=by_name), key=by_name)
    paired = PairedBenchmarks(
        missing_in_new=overlap.left_only,
        missing_in_old=overlap.right_only,
    )
    for old_record, new_record in overlap.paired:
        if old_record.failed and new_record.failed:
            paired.still_failing.append((old_record, new_record))
        elif new_record.failed:
            paired.failures.append((old_record, new_record))
        elif old_record.failed:
            paired.recoveries.append((old_record, new_record))
        else:
            paired.comparisons.append(compare(old_record, new_record))
    return paired
