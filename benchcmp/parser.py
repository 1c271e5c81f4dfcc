"""Parse libtest bench output into benchmark records."""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Dict, Iterable, List, Optional

from .formatting import drop_commas_and_parse
from .models import BenchmarkRecord, Failed, Measured

logger = logging.getLogger(__name__)

BENCHMARK_RE = re.compile(
    r"""
    test\s+(?P<name>\S+)                          # test   mod::test_name
    \s+\.\.\.\s+bench:\s+(?P<ns>[0-9,]+)\s+ns/iter  #  ... bench: 1,234 ns/iter
    \s+\(\+/-\s+(?P<variance>[0-9,]+)\)            #  (+/- 4,321)
    (?:\s+=\s+(?P<throughput>[0-9,]+)\s+MB/s)?     #  = 2,314 MB/s
    """,
    re.VERBOSE,
)
FAILED_RE = re.compile(r"test\s+(?P<name>\S+)\s+\.\.\.\s+FAILED\s*$")

FAILURE_HEADER_RE = re.compile(r"^----\s+(?P<name>\S+)\s+stdout\s+----")
PANIC_RE = re.compile(r"^thread\s+'(?P<thread>[^']*)'\s+panicked\s+at\s+(?P<rest>.*)$")
QUOTED_MESSAGE_RE = re.compile(r"^'(?P<message>.*)',")
CLOSING_QUOTE_RE = re.compile(r"^(?P<tail>.*)',\s")
BLOCK_END_RE = re.compile(r"^(failures:|test result:)")


def parse_line(line: str) -> Optional[BenchmarkRecord]:
    """Parse one line; ``None`` means the line is not a benchmark record."""
    line = line.rstrip("\r\n")
    match = BENCHMARK_RE.search(line)
    if match:
        ns = drop_commas_and_parse(match.group("ns"))
        variance = drop_commas_and_parse(match.group("variance"))
        throughput: Optional[int] = None
        if match.group("throughput") is not None:
            throughput = drop_commas_and_parse(match.group("throughput"))
            if throughput is None:
                return None
        if ns is None or variance is None:
            return None
        return BenchmarkRecord(match.group("name"), Measured(ns, variance, throughput))

    match = FAILED_RE.search(line)
    if match:
        return BenchmarkRecord(match.group("name"), Failed())
    return None


def _panic_message(rest: str) -> Optional[str]:
    # Older libtest: panicked at 'message', src/lib.rs:10:5
    # Newer libtest: panicked at src/lib.rs:10:5:  (message on the next line)
    quoted = QUOTED_MESSAGE_RE.match(rest)
    if quoted:
        return quoted.group("message")
    if rest.startswith("'") and rest.endswith("'") and len(rest) >= 2:
        return rest[1:-1]
    return None


def scan_failure_messages(lines: Iterable[str]) -> Dict[str, str]:
    """Collect panic messages from ``---- <name> stdout ----`` blocks.

    A quoted message left open on the panic line (``assert_eq!`` output in
    older libtest) continues until the line holding the closing ``',``; its
    lines are joined with single spaces.
    """
    messages: Dict[str, str] = {}
    open_block: Optional[str] = None
    awaiting_message = False
    quoted_parts: Optional[List[str]] = None

    def close_quoted() -> None:
        nonlocal quoted_parts
        if open_block is not None and quoted_parts is not None:
            messages.setdefault(open_block, " ".join(part for part in quoted_parts if part))
        quoted_parts = None

    for raw in lines:
        line = raw.rstrip("\r\n")
        header = FAILURE_HEADER_RE.match(line)
        if header:
            close_quoted()
            open_block = header.group("name")
            awaiting_message = False
            continue
        if open_block is None:
            continue
        if BLOCK_END_RE.match(line):
            close_quoted()
            open_block = None
            awaiting_message = False
            continue
        if quoted_parts is not None:
            closing = CLOSING_QUOTE_RE.match(line)
            if closing:
                quoted_parts.append(closing.group("tail").strip())
                close_quoted()
            elif line.endswith("'"):
                quoted_parts.append(line[:-1].strip())
                close_quoted()
            else:
                quoted_parts.append(line.strip())
            continue
        if awaiting_message:
            if line.strip():
                messages.setdefault(open_block, line.strip())
                awaiting_message = False
            continue
        panic = PANIC_RE.match(line)
        if panic is None:
            continue
        rest = panic.group("rest").strip()
        message = _panic_message(rest)
        if message is not None:
            messages.setdefault(open_block, message)
        elif rest.startswith("'"):
            quoted_parts = [rest[1:].strip()]
        else:
            awaiting_message = True
    close_quoted()
    return messages


def parse_lines(lines: Iterable[str]) -> List[BenchmarkRecord]:
    """Parse a whole report, attaching panic messages to failed records."""
    lines = list(lines)
    records: List[BenchmarkRecord] = []
    skipped = 0
    for line in lines:
        record = parse_line(line)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    messages = scan_failure_messages(lines)
    if messages:
        records = [
            dataclasses.replace(record, status=Failed(messages[record.name]))
            if record.failed and record.name in messages
            else record
            for record in records
        ]
    logger.debug("parsed %d benchmark records, skipped %d lines", len(records), skipped)
    return records
