"""Record predicates and ordering for the lookback window and problem views."""

from datetime import datetime, timedelta
from typing import Iterable, Iterator

from log_analyzer.models import LogRecord

PROBLEM_LEVELS = ("ERROR", "WARN")


def window_start(now: datetime, window: timedelta) -> datetime:
    return now - window


def in_window(record: LogRecord, start: datetime) -> bool:
    """True if the record is not older than the window start."""
    return record.timestamp >= start


def filter_window(records: Iterable[LogRecord], now: datetime, window: timedelta) -> Iterator[LogRecord]:
    """Keep records with timestamp >= now - window."""
    start = window_start(now, window)
    return (r for r in records if in_window(r, start))


def is_problem(record: LogRecord) -> bool:
    """True for ERROR and WARN records (exact level match)."""
    return record.level in PROBLEM_LEVELS


def filter_problems(records: Iterable[LogRecord]) -> list[LogRecord]:
    return [r for r in records if is_problem(r)]


def merge_chronological(records: Iterable[LogRecord]) -> list[LogRecord]:
    """Stable sort by timestamp; ties keep file order, then line order."""
    return sorted(records, key=lambda r: r.timestamp)


def contains_marker(record: LogRecord, marker: str) -> bool:
    """True if marker appears in the message (case-insensitive)."""
    return marker.lower() in record.message.lower()
