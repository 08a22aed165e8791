"""Log line parser: frozen dataclass + compiled regex, with a fallback record."""

import re
from datetime import datetime

from log_analyzer.models import LogRecord

LOG_PATTERN = re.compile(
    r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\] \[(\w+)\] (.*)$"
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

FALLBACK_LEVEL = "INFO"


def parse_line(line: str, source: str = "", fallback_time: datetime | None = None) -> LogRecord:
    """Parse a single log line into a LogRecord. Never raises.

    Lines without the ``[timestamp] [LEVEL] `` prefix become an INFO record
    stamped with ``fallback_time`` (or the current time) whose message is the
    whole line.
    """
    stripped = line.rstrip("\r\n")
    match = LOG_PATTERN.match(stripped)
    if match:
        timestamp_str, level, message = match.groups()
        try:
            timestamp = datetime.strptime(timestamp_str, TIMESTAMP_FORMAT)
        except ValueError:
            pass
        else:
            return LogRecord(
                timestamp=timestamp,
                level=level,
                message=message,
                source=source,
                raw=stripped,
            )

    return LogRecord(
        timestamp=fallback_time or datetime.now(),
        level=FALLBACK_LEVEL,
        message=stripped,
        source=source,
        raw=stripped,
    )


def format_record_line(record: LogRecord) -> str:
    """Rebuild the canonical ``[timestamp] [LEVEL] message`` line."""
    ts = record.timestamp.strftime(TIMESTAMP_FORMAT)
    return f"[{ts}] [{record.level}] {record.message}"
