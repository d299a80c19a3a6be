"""Free-text time-of-day parsing - no I/O dependencies."""

import logging
import re
from datetime import time

logger = logging.getLogger(__name__)

_HOUR_MINUTE = re.compile(r"^(\d{1,2}):(\d{2})\s*(am|pm)?$", re.IGNORECASE)
_HOUR_MERIDIEM = re.compile(r"^(\d{1,2})\s*(am|pm)$", re.IGNORECASE)


def _to_24h(hour: int, meridiem: str) -> int:
    meridiem = meridiem.lower()
    if meridiem == "pm" and hour != 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def parse_time_text(text: str | None) -> time | None:
    """
    Parse typed time text.

    Accepts ``16:00``, ``4:30 pm``, ``4pm``. Without a meridiem the hour is
    24-hour (0-23); with one it must be 1-12. Minutes are clamped to 0-59.
    Returns None for anything else.
    """
    if not text:
        return None
    s = text.strip()

    m = _HOUR_MINUTE.match(s)
    if m:
        hour = int(m[1])
        minute = min(59, max(0, int(m[2])))
        if m[3]:
            if not 1 <= hour <= 12:
                return None
            hour = _to_24h(hour, m[3])
        elif not 0 <= hour <= 23:
            return None
        return time(hour, minute)

    m = _HOUR_MERIDIEM.match(s)
    if m:
        hour = int(m[1])
        if not 1 <= hour <= 12:
            return None
        return time(_to_24h(hour, m[2]), 0)

    logger.debug(f"Unparseable time text: {text!r}")
    return None


def format_time_12h(t: time) -> str:
    """Format as "4:00 PM"."""
    hour12 = t.hour % 12 or 12
    meridiem = "AM" if t.hour < 12 else "PM"
    return f"{hour12}:{t.minute:02d} {meridiem}"


def format_time_24h(t: time) -> str:
    return t.strftime("%H:%M")


def format_time(t: time | None, style: str = "12h") -> str:
    """Format a time in the configured style; empty string for no time."""
    if t is None:
        return ""
    if style == "24h":
        return format_time_24h(t)
    return format_time_12h(t)


def commit_time_text(text: str, last_valid: time | None, style: str = "12h") -> tuple[time | None, str]:
    """
    Apply field text on blur.

    Returns (value, display_text). Empty text clears the time; unparseable
    text keeps ``last_valid`` and restores its display text.
    """
    if not text.strip():
        return None, ""
    parsed = parse_time_text(text)
    if parsed is None:
        return last_valid, format_time(last_valid, style)
    return parsed, format_time(parsed, style)
