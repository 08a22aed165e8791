"""Backup session reconstruction from start/finish marker records.

Pairing is a loose heuristic: each start takes the earliest finish strictly
after it, and a finish may close more than one start when runs overlap.
"""

from typing import Sequence

from log_analyzer.config import Config
from log_analyzer.filters import contains_marker
from log_analyzer.models import BackupSession, LogRecord


def reconstruct_sessions(records: Sequence[LogRecord], config: Config) -> list[BackupSession]:
    """Pair the newest session starts with their first following finish.

    ``records`` must already be window-filtered and in chronological order.
    Sessions are returned newest start first.
    """
    markers = config.markers
    starts = [r for r in records if contains_marker(r, markers.session_start)]
    finishes = [r for r in records if contains_marker(r, markers.session_finish)]

    newest_first = sorted(starts, key=lambda r: r.timestamp, reverse=True)
    sessions = []
    for start in newest_first[: config.session_limit]:
        finish = next((f for f in finishes if f.timestamp > start.timestamp), None)
        if finish is None:
            sessions.append(BackupSession(start=start))
            continue
        events = [r for r in records if start.timestamp <= r.timestamp <= finish.timestamp]
        sessions.append(BackupSession(start=start, finish=finish, events=events))
    return sessions
