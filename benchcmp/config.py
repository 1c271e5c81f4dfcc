"""Run configuration consumed by the comparison core and the report."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional

from .normalize import compile_pattern


class Show(enum.Enum):
    BOTH = "both"
    REGRESSIONS = "regressions"
    IMPROVEMENTS = "improvements"


class When(enum.Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class CompareConfig:
    threshold: Optional[int] = None
    show_variance: bool = False
    show: Show = Show.BOTH
    strip_old: Optional[re.Pattern[str]] = None
    strip_new: Optional[re.Pattern[str]] = None
    # single-file split mode
    old_prefix: Optional[str] = None
    new_prefix: Optional[str] = None
    include_missing: bool = False
    color: When = When.AUTO

    @property
    def split_mode(self) -> bool:
        return self.old_prefix is not None and self.new_prefix is not None


def build_config(
    threshold: Optional[int] = None,
    show_variance: bool = False,
    improvements: bool = False,
    regressions: bool = False,
    strip_old: Optional[str] = None,
    strip_new: Optional[str] = None,
    old_prefix: Optional[str] = None,
    new_prefix: Optional[str] = None,
    include_missing: bool = False,
    color: str = "auto",
) -> CompareConfig:
    """Validate raw option values; pattern errors raise ``ConfigError`` here."""
    if improvements and regressions:
        raise ValueError("improvements and regressions filters are mutually exclusive")
    if threshold is not None and threshold < 0:
        raise ValueError(f"threshold must be non-negative, got {threshold}")
    show = Show.BOTH
    if improvements:
        show = Show.IMPROVEMENTS
    elif regressions:
        show = Show.REGRESSIONS
    return CompareConfig(
        threshold=threshold,
        show_variance=show_variance,
        show=show,
        strip_old=compile_pattern(strip_old) if strip_old is not None else None,
        strip_new=compile_pattern(strip_new) if strip_new is not None else None,
        old_prefix=old_prefix,
        new_prefix=new_prefix,
        include_missing=include_missing,
        color=When(color),
    )
