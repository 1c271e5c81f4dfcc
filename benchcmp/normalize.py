"""Benchmark name normalization rules."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .errors import ConfigError
from .models import BenchmarkRecord


@dataclass(frozen=True)
class NoRule:
    pass


@dataclass(frozen=True)
class StripPrefix:
    prefix: str


@dataclass(frozen=True)
class StripPattern:
    pattern: re.Pattern[str]


NormalizationRule = Union[NoRule, StripPrefix, StripPattern]


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as err:
        raise ConfigError(pattern, str(err)) from err


def normalize(name: str, rule: NormalizationRule) -> str:
    if isinstance(rule, StripPrefix):
        # Names without the prefix are left alone; excluding them is up to the caller.
        if name.startswith(rule.prefix):
            return name[len(rule.prefix):]
        return name
    if isinstance(rule, StripPattern):
        return rule.pattern.sub("", name, count=1)
    return name


def apply_rule(records: Iterable[BenchmarkRecord], rule: NormalizationRule) -> List[BenchmarkRecord]:
    if isinstance(rule, NoRule):
        return list(records)
    return [dataclasses.replace(record, name=normalize(record.name, rule)) for record in records]


def split_by_prefix(
    records: Iterable[BenchmarkRecord],
    old_prefix: str,
    new_prefix: str,
) -> Tuple[List[BenchmarkRecord], List[BenchmarkRecord]]:
    """Split one report into old/new sides by name prefix.

    The old prefix is tested first. Records matching neither prefix belong
    to neither side and are dropped.
    """
    old: List[BenchmarkRecord] = []
    new: List[BenchmarkRecord] = []
    old_rule = StripPrefix(old_prefix)
    new_rule = StripPrefix(new_prefix)
    for record in records:
        if record.name.startswith(old_prefix):
            old.append(dataclasses.replace(record, name=normalize(record.name, old_rule)))
        elif record.name.startswith(new_prefix):
            new.append(dataclasses.replace(record, name=normalize(record.name, new_rule)))
    return old, new


def rule_for(pattern: Optional[re.Pattern[str]]) -> NormalizationRule:
    return NoRule() if pattern is None else StripPattern(pattern)
