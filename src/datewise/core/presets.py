"""Named relative date presets - no I/O dependencies.

Every function takes the reference instant explicitly; nothing here reads the
wall clock.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from .calendar_math import add_days, day_of_week, next_weekday_on_or_after

SATURDAY = 6
MONDAY = 1

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_WEEKS_LABEL = re.compile(r"^(\d{1,2})\s+weeks?$")


class Preset(Enum):
    """Quick-pick presets offered by the date picker."""

    TODAY = "Today"
    LATER = "Later"
    TOMORROW = "Tomorrow"
    THIS_WEEKEND = "This weekend"
    NEXT_WEEK = "Next week"
    NEXT_WEEKEND = "Next weekend"
    WEEKS = "weeks"


@dataclass(frozen=True)
class PresetResult:
    """Resolved preset: a date, plus a time for presets that imply one."""

    day: date
    at: time | None = None


def this_weekend(today: date) -> date:
    """Saturday on or after today. On a Saturday that is today."""
    return next_weekday_on_or_after(today, SATURDAY)


def next_week(today: date) -> date:
    """Monday strictly after today. On a Sunday that is tomorrow."""
    return next_weekday_on_or_after(add_days(today, 1), MONDAY)


def next_weekend(today: date) -> date:
    """Saturday of the week starting seven days from today."""
    return this_weekend(add_days(today, 7))


def resolve_preset(preset: Preset, now: datetime, weeks: int = 2) -> PresetResult:
    """
    Resolve a preset against ``now``.

    ``weeks`` is only used by Preset.WEEKS. Only Preset.LATER carries a time.
    """
    today = now.date()
    match preset:
        case Preset.TODAY:
            return PresetResult(today)
        case Preset.LATER:
            later = now + timedelta(hours=1)
            return PresetResult(later.date(), time(later.hour, later.minute))
        case Preset.TOMORROW:
            return PresetResult(add_days(today, 1))
        case Preset.THIS_WEEKEND:
            return PresetResult(this_weekend(today))
        case Preset.NEXT_WEEK:
            return PresetResult(next_week(today))
        case Preset.NEXT_WEEKEND:
            return PresetResult(next_weekend(today))
        case Preset.WEEKS:
            if weeks < 1:
                raise ValueError(f"weeks must be positive, got {weeks}")
            return PresetResult(add_days(today, 7 * weeks))
    raise ValueError(f"Unknown preset: {preset}")


def resolve_preset_label(label: str, now: datetime) -> PresetResult | None:
    """
    Resolve a display label ("This weekend", "3 weeks").

    Case-insensitive. Returns None for labels that name no preset.
    """
    s = " ".join(label.strip().lower().split())
    for preset in Preset:
        if preset is not Preset.WEEKS and preset.value.lower() == s:
            return resolve_preset(preset, now)
    m = _WEEKS_LABEL.match(s)
    if m and int(m[1]) >= 1:
        return resolve_preset(Preset.WEEKS, now, weeks=int(m[1]))
    return None


def format_relative_date(d: date, today: date) -> str:
    """
    Short display for a date relative to today.

    Yesterday/Today/Tomorrow by name, a weekday for 2-7 days ahead, otherwise
    "Mar 4".
    """
    diff = (d - today).days
    if diff == -1:
        return "Yesterday"
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if 2 <= diff <= 7:
        return DAY_NAMES[day_of_week(d)]
    return f"{MONTH_NAMES_SHORT[d.month - 1]} {d.day}"


@dataclass(frozen=True)
class QuickOption:
    """One row of the quick-pick list."""

    label: str
    result: PresetResult
    suffix: str


def _option_suffix(result: PresetResult, today: date) -> str:
    if result.at is not None:
        hour12 = result.at.hour % 12 or 12
        meridiem = "am" if result.at.hour < 12 else "pm"
        return f"{hour12}:{result.at.minute:02d} {meridiem}"
    if abs((result.day - today).days) <= 1:
        return DAY_NAMES[day_of_week(result.day)]
    return format_relative_date(result.day, today)


def quick_options(now: datetime, weeks: tuple[int, ...] = (2, 4)) -> list[QuickOption]:
    """
    Build the quick-pick list in display order.

    The "N weeks" rows come last, one per entry in ``weeks``.
    """
    today = now.date()
    options = []
    for preset in Preset:
        if preset is Preset.WEEKS:
            continue
        result = resolve_preset(preset, now)
        options.append(QuickOption(preset.value, result, _option_suffix(result, today)))
    for n in weeks:
        result = resolve_preset(Preset.WEEKS, now, weeks=n)
        label = f"{n} week" if n == 1 else f"{n} weeks"
        options.append(QuickOption(label, result, _option_suffix(result, today)))
    return options
