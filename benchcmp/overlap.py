"""Three-way partition of two sorted sequences."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, TypeVar

from .models import OverlapResult

T = TypeVar("T")


def _identity(item: Any) -> Any:
    return item


def find_overlap(
    left: Sequence[T],
    right: Sequence[T],
    key: Optional[Callable[[T], Any]] = None,
) -> OverlapResult[T]:
    """Split two ascending sequences into left-only, paired and right-only.

    Both inputs must already be sorted by ``key``; unsorted input gives an
    unspecified partition. Duplicate keys pair up in encounter order and any
    excess duplicates stay unpaired on their own side.
    """
    key = key or _identity
    result: OverlapResult[T] = OverlapResult()
    i = j = 0
    while i < len(left) and j < len(right):
        left_key = key(left[i])
        right_key = key(right[j])
        if left_key == right_key:
            result.paired.append((left[i], right[j]))
            i += 1
            j += 1
        elif left_key < right_key:
            result.left_only.append(left[i])
            i += 1
        else:
            result.right_only.append(right[j])
            j += 1
    result.left_only.extend(left[i:])
    result.right_only.extend(right[j:])
    return result
