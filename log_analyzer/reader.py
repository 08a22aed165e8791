"""Log file discovery, generator-based record reading, and tail."""

import logging
import os
import time
from datetime import datetime
from typing import Generator

from log_analyzer.config import Config
from log_analyzer.models import LogFileDescriptor, LogRecord
from log_analyzer.parser import parse_line

logger = logging.getLogger(__name__)

ALL_SOURCES = "all"


class NoLogDataError(FileNotFoundError):
    """Raised when the logs directory does not exist."""


def selected_sources(config: Config, selector: str = ALL_SOURCES) -> dict[str, str]:
    """Return the name -> filename map for the selector ("all" or one source)."""
    if selector == ALL_SOURCES:
        return dict(config.sources)
    if selector not in config.sources:
        raise ValueError(f"Unknown log source: {selector}")
    return {selector: config.sources[selector]}


def describe_file(name: str, path: str) -> LogFileDescriptor:
    st = os.stat(path)
    return LogFileDescriptor(
        name=name,
        path=path,
        size=st.st_size,
        modified=datetime.fromtimestamp(st.st_mtime),
    )


def discover_log_files(
    config: Config, selector: str = ALL_SOURCES
) -> tuple[list[LogFileDescriptor], list[str]]:
    """Check each selected source for its file under the logs directory.

    Returns (found descriptors, missing source names).
    Raises NoLogDataError if the logs directory itself is absent.
    """
    if not os.path.isdir(config.logs_dir):
        raise NoLogDataError(f"No log data available: {config.logs_dir} does not exist")

    found = []
    missing = []
    for name, filename in selected_sources(config, selector).items():
        path = os.path.join(config.logs_dir, filename)
        if not os.path.isfile(path):
            logger.warning("No log file found for %s (%s)", name, path)
            missing.append(name)
            continue
        found.append(describe_file(name, path))
    return found, missing


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each non-blank line of a single file."""
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            if line.strip():
                yield line


def read_records(
    descriptor: LogFileDescriptor, fallback_time: datetime | None = None
) -> Generator[LogRecord, None, None]:
    """Lazily parse every non-blank line of a discovered file, in file order."""
    for line in read_lines(descriptor.path):
        yield parse_line(line, source=descriptor.name, fallback_time=fallback_time)


def follow_file(filepath: str, poll_interval: float = 0.5) -> Generator[str, None, None]:
    """Seek to end of file and yield new non-blank lines as they appear.

    Polls with time.sleep(poll_interval). Runs until interrupted.
    """
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        f.seek(0, os.SEEK_END)
        buffer = ""
        while True:
            chunk = f.read()
            if chunk:
                buffer += chunk
                while "\n" in buffer:
                    line, buffer = buffer.split("\n", 1)
                    if line.strip():
                        yield line
            else:
                time.sleep(poll_interval)
