"""Month calendar grid - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date

from .calendar_math import add_days, make_date, start_of_week
from .errors import OutOfRange
from .occurrences import occurrences
from .recurrence import RecurrencePattern

GRID_CELLS = 42
WEEK_LENGTH = 7
WEEKDAY_HEADERS = ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@dataclass(frozen=True)
class CalendarCell:
    """One day in a month grid."""

    date: date
    in_current_month: bool


def build_month_grid(year: int, month: int) -> list[CalendarCell]:
    """
    Build the 6x7 grid for a month.

    The grid starts on the Sunday on or before the 1st and always holds 42
    cells, padding with days from the neighbouring months. Raises OutOfRange
    for an invalid month and for the first and last months of the supported
    range (January of year 1, December 9999), whose padding has no dates.
    """
    try:
        first = start_of_week(make_date(year, month, 1))
        days = [add_days(first, i) for i in range(GRID_CELLS)]
    except OverflowError as e:
        raise OutOfRange(f"No month grid for {year}-{month:02d}: {e}") from e
    cells = []
    for d in days:
        cells.append(CalendarCell(date=d, in_current_month=(d.year, d.month) == (year, month)))
    return cells


def grid_bounds(grid: list[CalendarCell]) -> tuple[date, date]:
    """First and last date shown in a grid."""
    return grid[0].date, grid[-1].date


def grid_rows(grid: list[CalendarCell]) -> list[list[CalendarCell]]:
    """Split a grid into Sunday-Saturday rows."""
    return [grid[i : i + WEEK_LENGTH] for i in range(0, len(grid), WEEK_LENGTH)]


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def highlight_occurrences(
    grid: list[CalendarCell],
    pattern: RecurrencePattern | None,
    anchor: date | None,
    today: date | None = None,
) -> set[date]:
    """
    Dates in the grid that are occurrences of the pattern.

    When ``today`` is given, past occurrences are left unhighlighted.
    """
    if pattern is None or anchor is None or not grid:
        return set()
    start, end = grid_bounds(grid)
    found = set(occurrences(pattern, anchor, start, end))
    if today is not None:
        found = {d for d in found if d >= today}
    return found
