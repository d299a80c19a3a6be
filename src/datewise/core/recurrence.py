"""Recurrence pattern model and its stored-string codec - no I/O dependencies.

Patterns are stored as one compact ``KEY=VALUE;...`` string, e.g.
``FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,TH;COUNT=6``. Keys are always written in
the same order and defaults are omitted, so equal patterns always produce
identical strings.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum

from .calendar_math import LAST_DAY, day_of_week
from .errors import InvalidPattern

logger = logging.getLogger(__name__)

_INT = re.compile(r"^-?\d+$")

MONTH_NAMES_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
SET_POS_LABELS = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth"}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Frequency(Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @property
    def unit(self) -> str:
        return {"DAILY": "day", "WEEKLY": "week", "MONTHLY": "month", "YEARLY": "year"}[self.value]


class Weekday(IntEnum):
    """Sunday-first weekday numbering, matching calendar_math.day_of_week."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def code(self) -> str:
        return self.name[:2]

    @property
    def short_name(self) -> str:
        return self.name[:3].title()

    @classmethod
    def from_code(cls, code: str) -> "Weekday":
        for day in cls:
            if day.code == code.upper():
                return day
        raise InvalidPattern(f"Unknown weekday code: {code!r}")


@dataclass(frozen=True)
class Never:
    """The pattern repeats indefinitely."""


@dataclass(frozen=True)
class Until:
    """Stop after the given date (inclusive)."""

    day: date

    def __post_init__(self):
        if not isinstance(self.day, date):
            raise InvalidPattern(f"until must be a date, got {self.day!r}")


@dataclass(frozen=True)
class AfterCount:
    """Stop after this many occurrences, the anchor included."""

    count: int

    def __post_init__(self):
        if not _is_int(self.count) or self.count < 1:
            raise InvalidPattern(f"count must be a positive integer, got {self.count!r}")


EndCondition = Never | Until | AfterCount

NEVER = Never()


@dataclass(frozen=True)
class RecurrencePattern:
    """
    A repeating rule, expanded against an anchor date.

    ``weekdays`` applies to WEEKLY patterns (empty means the anchor's
    weekday). MONTHLY patterns repeat on the anchor's day of month unless
    ``month_day`` (1-31, or -1 for the last day) or ``set_pos`` (1-5, with
    exactly one weekday, e.g. "second Tuesday") is given.
    """

    frequency: Frequency
    interval: int = 1
    weekdays: frozenset[Weekday] = field(default_factory=frozenset)
    end: EndCondition = NEVER
    month_day: int | None = None
    set_pos: int | None = None

    def __post_init__(self):
        if not isinstance(self.frequency, Frequency):
            raise InvalidPattern(f"Unknown frequency: {self.frequency!r}")
        if not _is_int(self.interval) or self.interval < 1:
            raise InvalidPattern(f"interval must be a positive integer, got {self.interval!r}")
        try:
            weekdays = frozenset(Weekday(w) for w in self.weekdays)
        except ValueError as e:
            raise InvalidPattern(str(e)) from e
        object.__setattr__(self, "weekdays", weekdays)

        if not isinstance(self.end, (Never, Until, AfterCount)):
            raise InvalidPattern(f"Unknown end condition: {self.end!r}")

        monthly = self.frequency is Frequency.MONTHLY
        if self.set_pos is not None:
            if not monthly:
                raise InvalidPattern("set_pos is only valid for monthly patterns")
            if not _is_int(self.set_pos) or self.set_pos not in SET_POS_LABELS:
                raise InvalidPattern(f"set_pos must be 1-5, got {self.set_pos!r}")
            if len(weekdays) != 1:
                raise InvalidPattern("set_pos needs exactly one weekday")
            if self.month_day is not None:
                raise InvalidPattern("month_day and set_pos are mutually exclusive")
        elif weekdays and self.frequency is not Frequency.WEEKLY:
            raise InvalidPattern("weekdays are only valid for weekly patterns")

        if self.month_day is not None:
            if not monthly:
                raise InvalidPattern("month_day is only valid for monthly patterns")
            if not _is_int(self.month_day) or (self.month_day != LAST_DAY and not 1 <= self.month_day <= 31):
                raise InvalidPattern(f"month_day must be 1-31 or -1, got {self.month_day!r}")

    @property
    def sorted_weekdays(self) -> list[Weekday]:
        return sorted(self.weekdays)


def serialize_pattern(pattern: RecurrencePattern | None) -> str | None:
    """Canonical stored string for a pattern; None for no recurrence."""
    if pattern is None:
        return None
    parts = [f"FREQ={pattern.frequency.value}"]
    if pattern.interval != 1:
        parts.append(f"INTERVAL={pattern.interval}")
    if pattern.weekdays:
        parts.append("BYDAY=" + ",".join(d.code for d in pattern.sorted_weekdays))
    if pattern.month_day is not None:
        parts.append(f"BYMONTHDAY={pattern.month_day}")
    if pattern.set_pos is not None:
        parts.append(f"BYSETPOS={pattern.set_pos}")
    match pattern.end:
        case Until(day=day):
            parts.append(f"UNTIL={day.isoformat()}")
        case AfterCount(count=count):
            parts.append(f"COUNT={count}")
    return ";".join(parts)


def _parse_int(value: str) -> int:
    if not _INT.match(value):
        raise InvalidPattern(f"Not an integer: {value!r}")
    try:
        return int(value)
    except ValueError as e:
        raise InvalidPattern(f"Integer too long: {len(value)} digits") from e


def _decode_rule(text: str) -> RecurrencePattern:
    fields: dict[str, str] = {}
    for token in text.split(";"):
        key, sep, value = token.partition("=")
        key = key.strip().upper()
        value = value.strip()
        if not sep or not key or not value:
            raise InvalidPattern(f"Malformed token: {token!r}")
        if key in fields:
            raise InvalidPattern(f"Duplicate key: {key}")
        fields[key] = value

    unknown = set(fields) - {"FREQ", "INTERVAL", "BYDAY", "BYMONTHDAY", "BYSETPOS", "UNTIL", "COUNT"}
    if unknown:
        raise InvalidPattern(f"Unknown keys: {', '.join(sorted(unknown))}")
    if "FREQ" not in fields:
        raise InvalidPattern("Missing FREQ")
    if "UNTIL" in fields and "COUNT" in fields:
        raise InvalidPattern("UNTIL and COUNT are mutually exclusive")

    try:
        frequency = Frequency(fields["FREQ"].upper())
    except ValueError as e:
        raise InvalidPattern(f"Unknown frequency: {fields['FREQ']!r}") from e

    end: EndCondition = NEVER
    if "UNTIL" in fields:
        try:
            end = Until(date.fromisoformat(fields["UNTIL"]))
        except ValueError as e:
            raise InvalidPattern(f"Bad UNTIL date: {fields['UNTIL']!r}") from e
    elif "COUNT" in fields:
        end = AfterCount(_parse_int(fields["COUNT"]))

    weekdays = frozenset()
    if "BYDAY" in fields:
        weekdays = frozenset(Weekday.from_code(c.strip()) for c in fields["BYDAY"].split(","))

    return RecurrencePattern(
        frequency=frequency,
        interval=_parse_int(fields["INTERVAL"]) if "INTERVAL" in fields else 1,
        weekdays=weekdays,
        end=end,
        month_day=_parse_int(fields["BYMONTHDAY"]) if "BYMONTHDAY" in fields else None,
        set_pos=_parse_int(fields["BYSETPOS"]) if "BYSETPOS" in fields else None,
    )


_LEGACY_FREQ = {
    "day": Frequency.DAILY,
    "week": Frequency.WEEKLY,
    "month": Frequency.MONTHLY,
    "year": Frequency.YEARLY,
}


def _decode_legacy_json(text: str) -> RecurrencePattern:
    """
    Decode the older JSON storage format.

    ``{"freq": "week", "interval": 2, "byDay": ["MO"], "until": "2025-06-01"}``.
    Yearly byMonth/byMonthDay are dropped; yearly patterns follow the anchor.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise InvalidPattern(f"Bad JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidPattern("Legacy pattern is not an object")

    freq = data.get("freq")
    frequency = _LEGACY_FREQ.get(freq) if isinstance(freq, str) else None
    if frequency is None:
        raise InvalidPattern(f"Unknown legacy freq: {data.get('freq')!r}")

    interval = data.get("interval") or 1
    if not _is_int(interval):
        raise InvalidPattern(f"Bad legacy interval: {interval!r}")

    by_day = data.get("byDay") or []
    if isinstance(by_day, str):
        by_day = [by_day]
    if not isinstance(by_day, list) or not all(isinstance(c, str) for c in by_day):
        raise InvalidPattern(f"Bad legacy byDay: {by_day!r}")

    end: EndCondition = NEVER
    if data.get("until"):
        try:
            end = Until(date.fromisoformat(data["until"]))
        except (TypeError, ValueError) as e:
            raise InvalidPattern(f"Bad legacy until: {data['until']!r}") from e

    weekdays = frozenset(Weekday.from_code(c) for c in by_day)
    month_day = None
    set_pos = None
    if frequency is Frequency.MONTHLY:
        if data.get("bySetPos") is not None:
            set_pos = data["bySetPos"]
            weekdays = frozenset(sorted(weekdays)[:1]) or frozenset({Weekday.SUNDAY})
        else:
            month_day = data.get("byMonthDay")
            weekdays = frozenset()
    elif frequency is not Frequency.WEEKLY:
        weekdays = frozenset()

    return RecurrencePattern(
        frequency=frequency,
        interval=max(1, interval),
        weekdays=weekdays,
        end=end,
        month_day=month_day,
        set_pos=set_pos,
    )


def parse_pattern(text: str | None) -> RecurrencePattern | None:
    """
    Parse a stored pattern string.

    Returns None for empty input and for anything corrupt or unsupported; a
    bad stored value degrades to "does not repeat".
    """
    if not text or not text.strip():
        return None
    s = text.strip()
    try:
        if s.startswith("{"):
            return _decode_legacy_json(s)
        return _decode_rule(s)
    except InvalidPattern as e:
        logger.warning(f"Ignoring invalid recurrence pattern {text!r}: {e}")
        return None


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def describe_pattern(pattern: RecurrencePattern | None, anchor: date | None = None) -> str:
    """
    Human-readable summary, e.g. "Every 2 weeks on Mon, Thu, 5 times".

    ``anchor`` fills in the day for monthly and yearly patterns that follow
    it. Returns an empty string for no pattern.
    """
    if pattern is None:
        return ""
    n = pattern.interval
    unit = pattern.frequency.unit
    text = f"Every {unit}" if n == 1 else f"Every {n} {unit}s"

    match pattern.frequency:
        case Frequency.WEEKLY:
            if pattern.weekdays:
                text += " on " + ", ".join(d.short_name for d in pattern.sorted_weekdays)
            elif anchor is not None:
                text += f" on {Weekday(day_of_week(anchor)).short_name}"
        case Frequency.MONTHLY:
            if pattern.set_pos is not None:
                weekday = pattern.sorted_weekdays[0].name.title()
                text += f" on the {SET_POS_LABELS[pattern.set_pos]} {weekday}"
            elif pattern.month_day == LAST_DAY:
                text += " on the last day"
            elif pattern.month_day is not None:
                text += f" on the {ordinal(pattern.month_day)}"
            elif anchor is not None:
                text += f" on the {ordinal(anchor.day)}"
        case Frequency.YEARLY:
            if anchor is not None:
                text += f" on {MONTH_NAMES_SHORT[anchor.month - 1]} {anchor.day}"

    match pattern.end:
        case Until(day=day):
            text += f", until {MONTH_NAMES_SHORT[day.month - 1]} {day.day}, {day.year}"
        case AfterCount(count=1):
            text += ", once"
        case AfterCount(count=count):
            text += f", {count} times"
    return text
