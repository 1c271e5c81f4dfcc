"""Data models for benchmark records, comparisons and overlap results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar, Union

from .formatting import fmt_thousands_sep

T = TypeVar("T")


@dataclass(frozen=True)
class Measured:
    ns: int
    variance: int
    throughput: Optional[int] = None


@dataclass(frozen=True)
class Failed:
    message: Optional[str] = None


Status = Union[Measured, Failed]


@dataclass(frozen=True)
class BenchmarkRecord:
    """One parsed benchmark line: a measurement or a failure marker."""

    name: str
    status: Status

    @property
    def failed(self) -> bool:
        return isinstance(self.status, Failed)

    @property
    def time_ns(self) -> Optional[int]:
        return self.status.ns if isinstance(self.status, Measured) else None

    @property
    def variance_ns(self) -> Optional[int]:
        return self.status.variance if isinstance(self.status, Measured) else None

    @property
    def throughput_mb_s(self) -> Optional[int]:
        return self.status.throughput if isinstance(self.status, Measured) else None

    @property
    def failure_message(self) -> Optional[str]:
        return self.status.message if isinstance(self.status, Failed) else None

    def fmt_ns(self, show_variance: bool) -> str:
        if isinstance(self.status, Failed):
            return "FAILED"
        text = fmt_thousands_sep(self.status.ns)
        if show_variance:
            text += f" (+/- {fmt_thousands_sep(self.status.variance)})"
        if self.status.throughput is not None:
            text += f" ({fmt_thousands_sep(self.status.throughput)} MB/s)"
        return text

    def to_line(self) -> str:
        """Render the record back into libtest's bench output format."""
        if isinstance(self.status, Failed):
            return f"test {self.name} ... FAILED"
        line = (
            f"test {self.name} ... bench: {fmt_thousands_sep(self.status.ns):>11} ns/iter "
            f"(+/- {fmt_thousands_sep(self.status.variance)})"
        )
        if self.status.throughput is not None:
            line += f" = {fmt_thousands_sep(self.status.throughput)} MB/s"
        return line


@dataclass(frozen=True)
class ComparisonRecord:
    """An old/new measured pair.

    Differences are signed in terms of regressions: a negative ``diff_ns``
    means the new run is faster (an improvement), a positive one means it is
    slower (a regression).
    """

    old: BenchmarkRecord
    new: BenchmarkRecord
    diff_ns: int
    diff_ratio: float
    speedup: float

    @property
    def name(self) -> str:
        return self.old.name

    @property
    def regression(self) -> bool:
        return self.diff_ns > 0

    @property
    def improvement(self) -> bool:
        return self.diff_ns < 0

    @property
    def percent(self) -> float:
        return self.diff_ratio * 100.0


@dataclass
class OverlapResult(Generic[T]):
    left_only: List[T] = field(default_factory=list)
    paired: List[Tuple[T, T]] = field(default_factory=list)
    right_only: List[T] = field(default_factory=list)


@dataclass
class PairedBenchmarks:
    comparisons: List[ComparisonRecord] = field(default_factory=list)
    # old-only / new-only records, ascending by name
    missing_in_new: List[BenchmarkRecord] = field(default_factory=list)
    missing_in_old: List[BenchmarkRecord] = field(default_factory=list)
    # (old, new) pairs where at least one side failed
    failures: List[Tuple[BenchmarkRecord, BenchmarkRecord]] = field(default_factory=list)
    recoveries: List[Tuple[BenchmarkRecord, BenchmarkRecord]] = field(default_factory=list)
    still_failing: List[Tuple[BenchmarkRecord, BenchmarkRecord]] = field(default_factory=list)
