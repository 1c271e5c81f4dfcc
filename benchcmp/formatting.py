"""Number formatting helpers shared by records and report rows."""

from __future__ import annotations

import math
import re
from typing import Optional

_DIGITS_RE = re.compile(r"[0-9]+")


def fmt_thousands_sep(n: int, sep: str = ",") -> str:
    if n < 0:
        raise ValueError(f"expected non-negative integer, got {n}")
    grouped = f"{n:,}"
    return grouped if sep == "," else grouped.replace(",", sep)


def fmt_signed(n: int, sep: str = ",") -> str:
    # Sign goes in front of the grouped magnitude; positives carry no sign.
    text = fmt_thousands_sep(abs(n), sep)
    return f"-{text}" if n < 0 else text


def drop_commas_and_parse(text: str) -> Optional[int]:
    digits = text.replace(",", "")
    if not _DIGITS_RE.fullmatch(digits):
        return None
    return int(digits)


def fmt_float(value: float, spec: str = ".2f") -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(value, spec)


def fmt_percent(ratio: float) -> str:
    return f"{fmt_float(ratio * 100.0)}%"


def fmt_speedup(value: float) -> str:
    return f"x {fmt_float(value)}"
