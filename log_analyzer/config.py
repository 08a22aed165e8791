"""Configuration loading from env vars and an optional YAML file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = {
    "backup": "backup.log",
    "export": "export.log",
    "diagnostics": "diagnostics.log",
}


class ConfigError(ValueError):
    """Raised when a config value cannot be used."""


@dataclass(frozen=True)
class Markers:
    backup_success: str = "backup completed successfully"
    backup_failure: str = "backup failed"
    session_start: str = "session started"
    session_finish: str = "session finished"


@dataclass(frozen=True)
class Config:
    logs_dir: str = "./logs"
    reports_dir: str = "./reports"
    sources: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SOURCES))
    lookback_hours: int = 24
    markers: Markers = field(default_factory=Markers)
    session_limit: int = 5
    report_limit: int = 50
    bucket_hours: int = 6
    bucket_count: int = 4


def _positive_int(name: str, raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_yaml_config(path: str | None) -> dict:
    """Load overrides from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from YAML data, overridden by environment variables."""
    yaml_data = yaml_data or {}

    sources = yaml_data.get("sources", DEFAULT_SOURCES)
    if not isinstance(sources, dict) or not sources:
        raise ConfigError("sources must be a non-empty mapping of name to filename")

    marker_data = yaml_data.get("markers") or {}
    if not isinstance(marker_data, dict):
        raise ConfigError("markers must be a mapping")
    unknown = set(marker_data) - set(Markers.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"Unknown marker(s): {', '.join(sorted(unknown))}")

    return Config(
        logs_dir=os.environ.get("LOG_DIR", yaml_data.get("logs_dir", Config.logs_dir)),
        reports_dir=os.environ.get("REPORTS_DIR", yaml_data.get("reports_dir", Config.reports_dir)),
        sources={str(k): str(v) for k, v in sources.items()},
        lookback_hours=_positive_int(
            "lookback_hours",
            os.environ.get("LOOKBACK_HOURS", yaml_data.get("lookback_hours", Config.lookback_hours)),
        ),
        markers=Markers(**{k: str(v) for k, v in marker_data.items()}),
        session_limit=_positive_int("session_limit", yaml_data.get("session_limit", Config.session_limit)),
        report_limit=_positive_int("report_limit", yaml_data.get("report_limit", Config.report_limit)),
    )
