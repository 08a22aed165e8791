"""Statistics snapshot and health classification."""

import json
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable

from log_analyzer.config import Config
from log_analyzer.filters import contains_marker
from log_analyzer.models import LEVELS, Health, LogRecord, LogStatistics, TimeBucket


def _empty_buckets(now: datetime, hours: int, count: int) -> list[tuple[datetime, datetime]]:
    """Bucket bounds newest first: (now - h, now], (now - 2h, now - h], ..."""
    span = timedelta(hours=hours)
    return [(now - span * (i + 1), now - span * i) for i in range(count)]


def compute_statistics(records: Iterable[LogRecord], now: datetime, config: Config) -> LogStatistics:
    """Consume a record stream and produce the statistics snapshot."""
    level_counter = Counter({level: 0 for level in LEVELS})
    source_counter = Counter()
    bounds = _empty_buckets(now, config.bucket_hours, config.bucket_count)
    bucket_counts = [0] * len(bounds)
    successes = 0
    failures = 0
    last_success = None
    total = 0

    markers = config.markers
    for record in records:
        total += 1
        level_counter[record.level] += 1
        source_counter[record.source] += 1

        for i, (start, end) in enumerate(bounds):
            if start < record.timestamp <= end:
                bucket_counts[i] += 1
                break

        if contains_marker(record, markers.backup_success):
            successes += 1
            if last_success is None or record.timestamp > last_success:
                last_success = record.timestamp
        if contains_marker(record, markers.backup_failure):
            failures += 1

    return LogStatistics(
        total=total,
        level_counts=dict(sorted(level_counter.items())),
        source_counts=dict(sorted(source_counter.items())),
        buckets=[
            TimeBucket(start=start, end=end, count=count)
            for (start, end), count in zip(bounds, bucket_counts)
        ],
        backup_successes=successes,
        backup_failures=failures,
        last_success=last_success,
    )


def classify_health(
    errors: int,
    failures: int,
    last_success: datetime | None,
    warnings: int,
    window_start: datetime,
) -> Health:
    """Map the four health inputs to a single label.

    Checked in order: healthy, issues resolved, needs attention, and
    finally stable with warnings.
    """
    if errors == 0 and failures == 0:
        return Health.HEALTHY
    if last_success is not None and last_success > window_start:
        return Health.ISSUES_RESOLVED
    if errors > 0 or failures > 0:
        return Health.NEEDS_ATTENTION
    return Health.STABLE_WITH_WARNINGS


def health_of(stats: LogStatistics, window_start: datetime) -> Health:
    return classify_health(
        stats.errors, stats.backup_failures, stats.last_success, stats.warnings, window_start
    )


def stats_to_dict(stats: LogStatistics, health: Health | None = None) -> dict:
    data = {
        "total_records": stats.total,
        "level_counts": stats.level_counts,
        "source_counts": stats.source_counts,
        "buckets": [
            {"start": b.start.isoformat(), "end": b.end.isoformat(), "count": b.count}
            for b in stats.buckets
        ],
        "backup_successes": stats.backup_successes,
        "backup_failures": stats.backup_failures,
        "last_success": stats.last_success.isoformat() if stats.last_success else None,
    }
    if health is not None:
        data["health"] = health.value
    return data


def format_stats_json(stats: LogStatistics, health: Health | None = None) -> str:
    """JSON stats output."""
    return json.dumps(stats_to_dict(stats, health), indent=2)
