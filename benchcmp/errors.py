"""Fatal error taxonomy for a comparison run."""

from __future__ import annotations

import pathlib


class BenchcmpError(Exception):
    """Base class for errors that abort a comparison run."""


class ConfigError(BenchcmpError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid name pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class InputError(BenchcmpError):
    def __init__(self, path: str | pathlib.Path, reason: str) -> None:
        super().__init__(f"failed to read {path}: {reason}")
        self.path = path
        self.reason = reason
