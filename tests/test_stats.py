"""Tests for log_analyzer/stats.py"""

import itertools
import json
import unittest
from datetime import datetime, timedelta

from log_analyzer.config import Config
from log_analyzer.models import Health, LogRecord, LogStatistics
from log_analyzer.stats import classify_health, compute_statistics, format_stats_json, health_of

NOW = datetime(2025, 1, 1, 12, 0, 0)
CONFIG = Config()


def _record(ts="2025-01-01 10:00:00", level="INFO", message="test message", source="backup") -> LogRecord:
    return LogRecord(
        timestamp=datetime.strptime(ts, "%Y-%m-%d %H:%M:%S"),
        level=level,
        message=message,
        source=source,
        raw=f"[{ts}] [{level}] {message}",
    )


class TestComputeStatistics(unittest.TestCase):
    def test_empty_stream(self):
        stats = compute_statistics(iter([]), NOW, CONFIG)
        self.assertEqual(stats.total, 0)
        self.assertEqual(stats.level_counts, {"ERROR": 0, "INFO": 0, "SUCCESS": 0, "WARN": 0})
        self.assertEqual(stats.source_counts, {})
        self.assertEqual([b.count for b in stats.buckets], [0, 0, 0, 0])
        self.assertEqual(stats.backup_successes, 0)
        self.assertEqual(stats.backup_failures, 0)
        self.assertIsNone(stats.last_success)

    def test_daily_backup_scenario(self):
        records = [
            _record(ts="2025-01-01 10:00:00", level="INFO", message="Daily backup session started"),
            _record(ts="2025-01-01 10:00:05", level="SUCCESS", message="Daily backup completed successfully"),
            _record(ts="2025-01-01 10:00:06", level="INFO", message="Daily backup session finished"),
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual(stats.level_counts, {"ERROR": 0, "INFO": 2, "SUCCESS": 1, "WARN": 0})
        self.assertEqual(stats.errors, 0)
        self.assertEqual(stats.warnings, 0)
        self.assertEqual(stats.backup_successes, 1)
        self.assertEqual(stats.last_success, datetime(2025, 1, 1, 10, 0, 5))

    def test_failed_backup_scenario(self):
        records = [
            _record(ts="2025-01-01 10:00:00", message="Daily backup session started"),
            _record(ts="2025-01-01 10:00:05", level="ERROR", message="Daily backup failed: network timeout"),
            _record(ts="2025-01-01 10:00:06", message="Daily backup session finished"),
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual(stats.errors, 1)
        self.assertEqual(stats.backup_failures, 1)
        self.assertEqual(stats.backup_successes, 0)
        self.assertIsNone(stats.last_success)

    def test_counts_partition_total(self):
        records = [
            _record(level="INFO", source="backup"),
            _record(level="ERROR", source="export"),
            _record(level="WARN", source="export"),
            _record(level="INFO", source="diagnostics"),
            _record(level="CUSTOM", source="backup"),
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual(stats.total, 5)
        self.assertEqual(sum(stats.level_counts.values()), stats.total)
        self.assertEqual(sum(stats.source_counts.values()), stats.total)

    def test_groups_sorted_alphabetically(self):
        records = [
            _record(level="WARN", source="export"),
            _record(level="ERROR", source="backup"),
            _record(level="SUCCESS", source="diagnostics"),
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual(list(stats.level_counts), ["ERROR", "INFO", "SUCCESS", "WARN"])
        self.assertEqual(list(stats.source_counts), ["backup", "diagnostics", "export"])

    def test_unknown_level_merged_with_zero_counts(self):
        stats = compute_statistics([_record(level="DEBUG"), _record(level="ERROR")], NOW, CONFIG)
        self.assertEqual(
            stats.level_counts,
            {"DEBUG": 1, "ERROR": 1, "INFO": 0, "SUCCESS": 0, "WARN": 0},
        )

    def test_six_hour_buckets_newest_first(self):
        records = [
            _record(ts="2025-01-01 12:00:00"),  # now -> newest bucket
            _record(ts="2025-01-01 06:00:01"),  # newest bucket
            _record(ts="2025-01-01 06:00:00"),  # boundary -> second bucket
            _record(ts="2024-12-31 20:00:00"),  # third bucket
            _record(ts="2024-12-31 12:00:00"),  # exactly now - 24h, outside all buckets
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual([b.count for b in stats.buckets], [2, 1, 1, 0])
        self.assertEqual(stats.buckets[0].end, NOW)
        self.assertEqual(stats.buckets[0].start, NOW - timedelta(hours=6))
        self.assertEqual(stats.buckets[3].start, NOW - timedelta(hours=24))

    def test_latest_success_wins(self):
        records = [
            _record(ts="2025-01-01 11:00:00", message="backup completed successfully"),
            _record(ts="2025-01-01 09:00:00", message="backup completed successfully"),
        ]
        stats = compute_statistics(records, NOW, CONFIG)
        self.assertEqual(stats.backup_successes, 2)
        self.assertEqual(stats.last_success, datetime(2025, 1, 1, 11, 0, 0))


class TestClassifyHealth(unittest.TestCase):
    START = datetime(2025, 1, 1, 0, 0, 0)

    def test_healthy(self):
        self.assertEqual(classify_health(0, 0, None, 0, self.START), Health.HEALTHY)

    def test_healthy_takes_precedence_over_warnings(self):
        self.assertEqual(classify_health(0, 0, None, 3, self.START), Health.HEALTHY)

    def test_issues_resolved(self):
        later = self.START + timedelta(hours=2)
        self.assertEqual(classify_health(2, 1, later, 0, self.START), Health.ISSUES_RESOLVED)

    def test_success_not_after_window_start(self):
        self.assertEqual(classify_health(1, 0, self.START, 0, self.START), Health.NEEDS_ATTENTION)

    def test_needs_attention_on_failures_only(self):
        self.assertEqual(classify_health(0, 1, None, 0, self.START), Health.NEEDS_ATTENTION)

    def test_total_function(self):
        successes = (None, self.START - timedelta(hours=1), self.START + timedelta(hours=1))
        for errors, failures, last, warnings in itertools.product((0, 1), (0, 2), successes, (0, 5)):
            health = classify_health(errors, failures, last, warnings, self.START)
            self.assertIsInstance(health, Health)
            if errors == 0 and failures == 0:
                self.assertEqual(health, Health.HEALTHY)

    def test_health_of_statistics(self):
        stats = LogStatistics(level_counts={"ERROR": 1}, backup_failures=1)
        self.assertEqual(health_of(stats, self.START), Health.NEEDS_ATTENTION)


class TestFormatStatsJson(unittest.TestCase):
    def test_valid_json(self):
        records = [_record(level="SUCCESS", message="Daily backup completed successfully")]
        stats = compute_statistics(records, NOW, CONFIG)
        parsed = json.loads(format_stats_json(stats, Health.HEALTHY))
        self.assertEqual(parsed["total_records"], 1)
        self.assertEqual(parsed["level_counts"], {"ERROR": 0, "INFO": 0, "SUCCESS": 1, "WARN": 0})
        self.assertEqual(parsed["last_success"], "2025-01-01T10:00:00")
        self.assertEqual(parsed["health"], "healthy")
        self.assertEqual(len(parsed["buckets"]), 4)

    def test_no_health_key_without_health(self):
        parsed = json.loads(format_stats_json(LogStatistics()))
        self.assertNotIn("health", parsed)
        self.assertIsNone(parsed["last_success"])


if __name__ == "__main__":
    unittest.main()
