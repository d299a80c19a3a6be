"""Date-only and timed values at the ISO-8601 boundary - no I/O dependencies."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ISO_INSTANT = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$")


@dataclass(frozen=True)
class DateOnly:
    """An all-day value: a calendar date with no time component."""

    day: date

    def to_iso(self) -> str:
        return self.day.isoformat()

    @property
    def time(self) -> None:
        return None


@dataclass(frozen=True)
class Instant:
    """A calendar date with a time of day (minute precision)."""

    day: date
    time: time

    def __post_init__(self):
        object.__setattr__(self, "time", self.time.replace(second=0, microsecond=0, tzinfo=None))

    def to_iso(self) -> str:
        return f"{self.day.isoformat()}T{self.time.strftime('%H:%M')}"

    def to_datetime(self) -> datetime:
        return datetime.combine(self.day, self.time)


DateValue = DateOnly | Instant


def combine(day: date, at: time | None = None) -> DateValue:
    """Build a DateOnly when no time is given, otherwise an Instant."""
    if at is None:
        return DateOnly(day)
    return Instant(day, at)


def parse_date_value(text: str | None) -> DateValue | None:
    """
    Parse a stored ISO value.

    A bare ``YYYY-MM-DD`` is DateOnly; anything with a time component is an
    Instant (seconds and any UTC offset are dropped). Returns None for empty
    or malformed input.
    """
    if not text:
        return None
    s = text.strip()

    m = _ISO_DATE.match(s)
    if m:
        try:
            return DateOnly(date(int(m[1]), int(m[2]), int(m[3])))
        except ValueError:
            return None

    m = _ISO_INSTANT.match(s)
    if m:
        try:
            return Instant(date(int(m[1]), int(m[2]), int(m[3])), time(int(m[4]), int(m[5])))
        except ValueError:
            return None

    return None


def end_of(value: DateValue) -> datetime:
    """The last moment a value covers: end of day for DateOnly."""
    if isinstance(value, Instant):
        return value.to_datetime()
    return datetime.combine(value.day, time.max)


def is_overdue(value: DateValue | None, now: datetime) -> bool:
    """
    True once ``now`` is past the value.

    A DateOnly value is treated as the end of that day, so a task due today is
    not overdue until tomorrow.
    """
    if value is None:
        return False
    return end_of(value) < now.replace(tzinfo=None)


def order_start_due(start: DateValue | None, due: DateValue | None) -> tuple[DateValue | None, DateValue | None]:
    """
    Enforce start <= due.

    A date-only start counts from the beginning of its day and a date-only due
    until the end of its day. When start is later than due, due takes the
    start value.
    """
    if start is None or due is None:
        return start, due
    start_at = start.to_datetime() if isinstance(start, Instant) else datetime.combine(start.day, time.min)
    if start_at > end_of(due):
        return start, start
    return start, due
