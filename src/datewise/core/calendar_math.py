"""Pure calendar arithmetic - no I/O dependencies.

Weekdays are numbered Sunday-first (0 = Sunday ... 6 = Saturday) throughout
the engine, unlike ``date.weekday()`` which is Monday-first.
"""

import calendar
from datetime import date, timedelta

from .errors import OutOfRange

LAST_DAY = -1


def make_date(year: int, month: int, day: int) -> date:
    """Build a date, raising OutOfRange instead of overflowing."""
    try:
        return date(year, month, day)
    except ValueError as e:
        raise OutOfRange(f"{year}-{month}-{day}: {e}") from e


def add_days(d: date, n: int) -> date:
    """Add (or subtract) days, rolling over months and years."""
    return d + timedelta(days=n)


def day_of_week(d: date) -> int:
    """Day of week, 0 = Sunday ... 6 = Saturday."""
    return (d.weekday() + 1) % 7


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap years included."""
    if not 1 <= month <= 12:
        raise OutOfRange(f"month {month} out of range")
    return calendar.monthrange(year, month)[1]


def clamp_day_of_month(year: int, month: int, day: int) -> int:
    """
    Clamp a day to the length of the month.

    ``clamp_day_of_month(2023, 2, 31) == 28``. ``LAST_DAY`` (-1) always maps to
    the last day of the month.
    """
    last = days_in_month(year, month)
    if day == LAST_DAY:
        return last
    return max(1, min(day, last))


def add_months(year: int, month: int, n: int) -> tuple[int, int]:
    """Shift a (year, month) pair by n months in either direction."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def clamped_date(year: int, month: int, day: int) -> date:
    """Date for year/month with the day clamped into the month."""
    return date(year, month, clamp_day_of_month(year, month, day))


def start_of_week(d: date) -> date:
    """The Sunday on or before d."""
    return add_days(d, -day_of_week(d))


def next_weekday_on_or_after(d: date, weekday: int) -> date:
    """First date on or after d falling on the given Sunday-first weekday."""
    return add_days(d, (weekday - day_of_week(d)) % 7)


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """
    The n-th given weekday of a month (n = 1..5).

    Months without an n-th such weekday fall back to the last one, so
    "fifth Friday" lands on the final Friday of a four-Friday month.
    """
    first = next_weekday_on_or_after(date(year, month, 1), weekday)
    candidate = add_days(first, 7 * (n - 1))
    while candidate.month != month:
        candidate = add_days(candidate, -7)
    return candidate
