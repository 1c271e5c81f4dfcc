"""Input reading and column naming helpers."""

from __future__ import annotations

import pathlib
import sys
from typing import List, Optional, TextIO, Tuple

from .errors import InputError

STDIN_MARKER = "-"


def read_lines(path: str, stdin: Optional[TextIO] = None) -> List[str]:
    """Read a whole report; ``-`` reads standard input."""
    if path == STDIN_MARKER:
        stream = stdin if stdin is not None else sys.stdin
        # Decode stdin bytes the same way files are decoded.
        buffer = getattr(stream, "buffer", None)
        if buffer is not None:
            return buffer.read().decode("utf-8", errors="replace").splitlines()
        return stream.read().splitlines()
    try:
        return pathlib.Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as err:
        raise InputError(path, err.strerror or str(err)) from err


def column_names(arg_old: str, arg_new: str) -> Tuple[str, str]:
    """Pick the column header names for the old and new runs.

    Empty names fall back to ``old``/``new``. When both arguments are
    multi-component paths, the shortest trailing components that tell them
    apart are used, so ``a/x/bench.txt`` vs ``a/y/bench.txt`` becomes
    ``x/bench.txt`` vs ``y/bench.txt``.
    """
    arg_old = arg_old or "old"
    arg_new = arg_new or "new"
    old_parts = pathlib.PurePath(arg_old).parts
    new_parts = pathlib.PurePath(arg_new).parts
    if len(old_parts) <= 1 or len(new_parts) <= 1:
        return arg_old, arg_new

    unique_old: List[str] = []
    unique_new: List[str] = []
    for old_part, new_part in zip(reversed(old_parts), reversed(new_parts)):
        unique_old.append(old_part)
        unique_new.append(new_part)
        if old_part != new_part:
            break
    return (
        str(pathlib.PurePath(*reversed(unique_old))),
        str(pathlib.PurePath(*reversed(unique_new))),
    )
