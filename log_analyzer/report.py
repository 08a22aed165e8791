"""Static HTML report rendered from a Jinja2 template."""

import logging
import os
from datetime import datetime

from jinja2 import Environment, FileSystemLoader, select_autoescape

from log_analyzer.analyzer import AnalysisResult
from log_analyzer.formatter import human_size

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
REPORT_TEMPLATE = "report.html"
FILENAME_FORMAT = "log_report_%Y%m%d_%H%M%S.html"


class ReportWriteError(OSError):
    """Raised when the HTML report cannot be written."""


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["human_size"] = human_size
    return env


def report_context(result: AnalysisResult, limit: int = 50) -> dict:
    """Template variables: files, level counts and the newest records first."""
    return {
        "generated_at": result.now,
        "window_hours": int(result.window.total_seconds() // 3600),
        "window_start": result.window_start,
        "files": result.files,
        "missing": result.missing,
        "level_counts": result.stats.level_counts,
        "total": result.stats.total,
        "health": result.health.value,
        "records": list(reversed(result.records))[:limit],
        "limit": limit,
    }


def render_report(result: AnalysisResult, limit: int = 50) -> str:
    template = _environment().get_template(REPORT_TEMPLATE)
    return template.render(**report_context(result, limit))


def report_path(reports_dir: str, generated_at: datetime, attempt: int = 0) -> str:
    """Timestamped report path; attempt N > 0 adds a _N suffix."""
    name = generated_at.strftime(FILENAME_FORMAT)
    if attempt:
        stem, ext = os.path.splitext(name)
        name = f"{stem}_{attempt}{ext}"
    return os.path.join(reports_dir, name)


def write_report(result: AnalysisResult, reports_dir: str, limit: int = 50) -> str:
    """Render and write the report; returns the written path.

    Never overwrites an existing report: a second report in the same second
    gets a numeric suffix. Raises ReportWriteError if the directory or file
    cannot be written.
    """
    html = render_report(result, limit)
    path = report_path(reports_dir, result.now)
    try:
        os.makedirs(reports_dir, exist_ok=True)
        attempt = 0
        while True:
            path = report_path(reports_dir, result.now, attempt)
            try:
                f = open(path, "x", encoding="utf-8")
            except FileExistsError:
                attempt += 1
                continue
            with f:
                f.write(html)
            break
    except OSError as e:
        raise ReportWriteError(f"Failed to write report {path}: {e}") from e
    logger.info("Wrote HTML report to %s", path)
    return path
