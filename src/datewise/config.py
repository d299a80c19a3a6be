"""Configuration management for datewise."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DATEWISE_HOME = Path(os.environ.get("DATEWISE_HOME", Path.home() / "datewise"))
CONFIG_FILE = DATEWISE_HOME / "config" / "datewise.conf"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """datewise configuration."""

    two_digit_year_pivot: int = 30
    time_format: str = "12h"
    quick_weeks: list[int] = field(default_factory=lambda: [2, 4])
    occurrence_window_days: int = 365
    log_level: str = "WARNING"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _positive_int(key: str, value: str, low: int = 1, high: int | None = None) -> int | None:
    try:
        n = int(value)
    except ValueError:
        logger.warning(f"Ignoring {key.upper()}: not an integer: {value!r}")
        return None
    if n < low or (high is not None and n > high):
        logger.warning(f"Ignoring {key.upper()}: {n} out of range")
        return None
    return n


def load_config(path: Path | None = None) -> Config:
    """Load configuration from datewise.conf; missing file means defaults."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "two_digit_year_pivot":
                pivot = _positive_int(key, value, high=99)
                if pivot is not None:
                    config.two_digit_year_pivot = pivot
            case "time_format":
                if value.lower() in ("12h", "24h"):
                    config.time_format = value.lower()
                else:
                    logger.warning(f"Ignoring TIME_FORMAT: expected 12h or 24h, got {value!r}")
            case "quick_weeks":
                weeks = [_positive_int(key, w.strip(), high=52) for w in value.split(",") if w.strip()]
                if weeks and None not in weeks:
                    config.quick_weeks = weeks
            case "occurrence_window_days":
                days = _positive_int(key, value)
                if days is not None:
                    config.occurrence_window_days = days
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Ignoring LOG_LEVEL: unknown level {value!r}")

    return config
