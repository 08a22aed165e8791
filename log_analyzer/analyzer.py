"""Single-pass analysis: discover, read, filter, merge, aggregate."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from log_analyzer.config import Config
from log_analyzer.filters import filter_window, merge_chronological, window_start
from log_analyzer.models import BackupSession, Health, LogFileDescriptor, LogRecord, LogStatistics
from log_analyzer.reader import ALL_SOURCES, discover_log_files, read_records
from log_analyzer.sessions import reconstruct_sessions
from log_analyzer.stats import compute_statistics, health_of

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    now: datetime
    window: timedelta
    files: list[LogFileDescriptor] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    unreadable: dict[str, str] = field(default_factory=dict)
    records: list[LogRecord] = field(default_factory=list)
    stats: LogStatistics = field(default_factory=LogStatistics)
    sessions: list[BackupSession] = field(default_factory=list)
    health: Health = Health.HEALTHY

    @property
    def window_start(self) -> datetime:
        return window_start(self.now, self.window)


class LogAnalyzer:
    """Runs one analysis pass over the configured log sources."""

    def __init__(self, config: Config, clock: Callable[[], datetime] = datetime.now):
        self._config = config
        self._clock = clock

    @property
    def config(self) -> Config:
        return self._config

    def collect(
        self, files: list[LogFileDescriptor], now: datetime, window: timedelta
    ) -> tuple[list[LogRecord], dict[str, str]]:
        """Read and window-filter every file; unreadable files are skipped.

        Returns (chronologically merged records, {path: error}).
        """
        kept: list[LogRecord] = []
        unreadable: dict[str, str] = {}
        for descriptor in files:
            try:
                records = list(filter_window(read_records(descriptor, fallback_time=now), now, window))
            except OSError as e:
                logger.error("Failed to read %s: %s", descriptor.path, e)
                unreadable[descriptor.path] = str(e)
                continue
            logger.debug("Read %d record(s) in window from %s", len(records), descriptor.path)
            kept.extend(records)
        return merge_chronological(kept), unreadable

    def analyze(self, selector: str = ALL_SOURCES, hours: int | None = None) -> AnalysisResult:
        """Discover, parse, filter and aggregate.

        Raises NoLogDataError if the logs directory does not exist.
        """
        now = self._clock()
        window = timedelta(hours=hours or self._config.lookback_hours)

        files, missing = discover_log_files(self._config, selector)
        result = AnalysisResult(now=now, window=window, files=files, missing=missing)

        result.records, result.unreadable = self.collect(files, now, window)
        if not result.records:
            logger.info("No records within the last %s", window)

        result.stats = compute_statistics(result.records, now, self._config)
        result.sessions = reconstruct_sessions(result.records, self._config)
        result.health = health_of(result.stats, result.window_start)
        return result
