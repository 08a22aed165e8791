"""Console rendering of the analysis models, plain or ANSI-colored."""

from typing import Callable

from log_analyzer.models import BackupSession, Health, LogFileDescriptor, LogRecord, LogStatistics

# ANSI color codes
COLORS = {
    "SUCCESS": "\033[32m",  # green
    "INFO": "\033[36m",     # cyan
    "WARN": "\033[33m",     # yellow
    "ERROR": "\033[31m",    # red
}
RESET = "\033[0m"

HEALTH_COLORS = {
    Health.HEALTHY: COLORS["SUCCESS"],
    Health.ISSUES_RESOLVED: COLORS["INFO"],
    Health.NEEDS_ATTENTION: COLORS["ERROR"],
    Health.STABLE_WITH_WARNINGS: COLORS["WARN"],
}

NONE_FOUND = "  none found"
TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_text(record: LogRecord) -> str:
    """Return the raw log line prefixed with its source."""
    return f"{record.source}: {record.raw}"


def format_color(record: LogRecord) -> str:
    """Return the log line with ANSI-colored level."""
    color = COLORS.get(record.level, "")
    ts = record.timestamp.strftime(TS_FORMAT)
    return f"{record.source}: [{ts}] [{color}{record.level}{RESET}] {record.message}"


def get_formatter(color: bool = False) -> Callable[[LogRecord], str]:
    return format_color if color else format_text


def human_size(n: int) -> str:
    units = ["B", "KB", "MB", "GB"]
    f = float(n)
    for u in units:
        if f < 1024 or u == units[-1]:
            return f"{f:.1f} {u}"
        f /= 1024.0


def format_inventory(files: list[LogFileDescriptor], missing: list[str]) -> str:
    lines = ["Log files:"]
    if not files:
        lines.append(NONE_FOUND)
    for d in files:
        lines.append(
            f"  {d.name:12s} {d.path}  {human_size(d.size)}  modified {d.modified.strftime(TS_FORMAT)}"
        )
    for name in missing:
        lines.append(f"  {name:12s} (no log file)")
    return "\n".join(lines)


def format_records(title: str, records: list[LogRecord], color: bool = False) -> str:
    formatter = get_formatter(color)
    lines = [f"{title} ({len(records)}):"]
    if not records:
        lines.append(NONE_FOUND)
    lines.extend(f"  {formatter(r)}" for r in records)
    return "\n".join(lines)


def format_stats_text(stats: LogStatistics) -> str:
    """Human-readable stats summary."""
    lines = [f"Total records: {stats.total}", ""]

    lines.append("Level counts:")
    if not stats.level_counts:
        lines.append(NONE_FOUND)
    for level, count in stats.level_counts.items():
        lines.append(f"  {level:8s} {count}")
    lines.append("")

    lines.append("Source counts:")
    if not stats.source_counts:
        lines.append(NONE_FOUND)
    for source, count in stats.source_counts.items():
        lines.append(f"  {source:12s} {count}")
    lines.append("")

    lines.append("Activity (newest first):")
    for bucket in stats.buckets:
        lines.append(
            f"  {bucket.start.strftime('%m-%d %H:%M')} - {bucket.end.strftime('%m-%d %H:%M')}  {bucket.count}"
        )
    lines.append("")

    lines.append(f"Successful backups: {stats.backup_successes}")
    lines.append(f"Failed backups:     {stats.backup_failures}")
    if stats.last_success:
        lines.append(f"Last success:       {stats.last_success.strftime(TS_FORMAT)}")
    else:
        lines.append("Last success:       none found")
    return "\n".join(lines)


def format_duration(session: BackupSession) -> str:
    seconds = int(session.duration.total_seconds())
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_sessions(sessions: list[BackupSession], color: bool = False) -> str:
    formatter = get_formatter(color)
    lines = ["Backup sessions (newest first):"]
    if not sessions:
        lines.append(NONE_FOUND)
    for session in sessions:
        started = session.start.timestamp.strftime(TS_FORMAT)
        if not session.complete:
            lines.append(f"  {started}  running or incomplete")
            continue
        lines.append(f"  {started}  finished after {format_duration(session)}")
        for event in session.events:
            lines.append(f"    {formatter(event)}")
    return "\n".join(lines)


def format_health(health: Health, color: bool = False) -> str:
    label = health.value.upper()
    if color:
        label = f"{HEALTH_COLORS[health]}{label}{RESET}"
    return f"Overall health: {label}"
