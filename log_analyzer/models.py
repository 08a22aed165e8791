"""Typed records shared by the parser, aggregations and renderers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

LEVELS = ("SUCCESS", "INFO", "WARN", "ERROR")


@dataclass(frozen=True)
class LogRecord:
    timestamp: datetime
    level: str
    message: str
    source: str
    raw: str


@dataclass(frozen=True)
class LogFileDescriptor:
    name: str
    path: str
    size: int
    modified: datetime


@dataclass(frozen=True)
class TimeBucket:
    """Record count for the half-open interval (start, end]."""

    start: datetime
    end: datetime
    count: int = 0


@dataclass
class LogStatistics:
    total: int = 0
    level_counts: dict[str, int] = field(default_factory=dict)
    source_counts: dict[str, int] = field(default_factory=dict)
    buckets: list[TimeBucket] = field(default_factory=list)
    backup_successes: int = 0
    backup_failures: int = 0
    last_success: datetime | None = None

    @property
    def errors(self) -> int:
        return self.level_counts.get("ERROR", 0)

    @property
    def warnings(self) -> int:
        return self.level_counts.get("WARN", 0)


@dataclass
class BackupSession:
    start: LogRecord
    finish: LogRecord | None = None
    events: list[LogRecord] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.finish is not None

    @property
    def duration(self) -> timedelta | None:
        if self.finish is None:
            return None
        return self.finish.timestamp - self.start.timestamp


class Health(Enum):
    HEALTHY = "healthy"
    ISSUES_RESOLVED = "issues resolved"
    NEEDS_ATTENTION = "needs attention"
    STABLE_WITH_WARNINGS = "stable with warnings"
