"""Shared workflow layer between the CLI and embedding applications.

Composes the pure core the way the date picker uses it: field text is
committed on blur, the month view is built with recurrence highlighting, and
the values handed back to the persistence layer are produced in one step.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .config import Config
from .core.calendar_grid import (
    CalendarCell,
    build_month_grid,
    grid_rows,
    highlight_occurrences,
    month_label,
)
from .core.date_text import parse_date_text
from .core.date_values import DateValue, Instant, combine, order_start_due, parse_date_value
from .core.edit_session import RecurrenceEditSession
from .core.errors import InvalidPattern, ParseFailure
from .core.occurrences import next_occurrence
from .core.presets import QuickOption, quick_options
from .core.recurrence import RecurrencePattern, parse_pattern
from .core.time_text import parse_time_text
from .ports.clock import Clock

logger = logging.getLogger(__name__)


def reference_now(now_text: str | None, clock: Clock) -> datetime:
    """
    The reference instant for a call: ``now_text`` if given, else the clock.

    ``now_text`` is ISO; a bare date means midnight of that day.
    """
    if not now_text:
        return clock.now()
    value = parse_date_value(now_text)
    if value is None:
        raise ParseFailure(f"Not an ISO date or date-time: {now_text!r}")
    if isinstance(value, Instant):
        return value.to_datetime()
    return datetime.combine(value.day, time.min)


def require_date(text: str, today: date, config: Config | None = None) -> date:
    """Parse date text or raise ParseFailure."""
    pivot = config.two_digit_year_pivot if config else 30
    parsed = parse_date_text(text, today, pivot)
    if parsed is None:
        raise ParseFailure(f"Could not understand date: {text!r}")
    return parsed


def require_time(text: str) -> time:
    """Parse time text or raise ParseFailure."""
    parsed = parse_time_text(text)
    if parsed is None:
        raise ParseFailure(f"Could not understand time: {text!r}")
    return parsed


def require_pattern(text: str) -> RecurrencePattern:
    """Parse a stored pattern or raise InvalidPattern."""
    pattern = parse_pattern(text)
    if pattern is None:
        raise InvalidPattern(f"Not a valid recurrence pattern: {text!r}")
    return pattern


def default_window(today: date, config: Config) -> tuple[date, date]:
    """Occurrence window starting today, ``occurrence_window_days`` long."""
    return today, today + timedelta(days=config.occurrence_window_days - 1)


@dataclass
class PickerView:
    """Everything needed to render the date picker for one month."""

    title: str
    today: date
    rows: list[list[CalendarCell]]
    highlighted: set[date]
    quick_options: list[QuickOption]
    due: DateValue | None
    recurrence: RecurrencePattern | None


def build_picker_view(
    now: datetime,
    year: int,
    month: int,
    due: DateValue | None = None,
    stored_pattern: str | None = None,
    config: Config | None = None,
) -> PickerView:
    """
    Assemble the picker view for a month.

    Occurrences are anchored on the due date and past ones are not
    highlighted. Raises OutOfRange for a month with no grid.
    """
    config = config or Config()
    today = now.date()
    grid = build_month_grid(year, month)
    pattern = parse_pattern(stored_pattern)
    anchor = due.day if due is not None else None
    return PickerView(
        title=month_label(year, month),
        today=today,
        rows=grid_rows(grid),
        highlighted=highlight_occurrences(grid, pattern, anchor, today=today),
        quick_options=quick_options(now, tuple(config.quick_weeks)),
        due=due,
        recurrence=pattern,
    )


@dataclass
class SavedDates:
    """Values written back to the task/reminder record."""

    start: str | None
    due: str | None
    recurrence: str | None


def save_dates(
    start_day: date | None,
    start_time: time | None,
    due_day: date | None,
    due_time: time | None,
    session: RecurrenceEditSession | None = None,
) -> SavedDates:
    """
    Combine picker fields into stored values.

    A start later than the due value replaces the due value. The recurrence
    session, if any, is saved and closed.
    """
    start = combine(start_day, start_time) if start_day else None
    due = combine(due_day, due_time) if due_day else None
    start, due = order_start_due(start, due)
    recurrence = session.save() if session is not None else None
    return SavedDates(
        start=start.to_iso() if start else None,
        due=due.to_iso() if due else None,
        recurrence=recurrence,
    )


def roll_forward(due: str | None, stored_pattern: str | None, series_start: date | None = None) -> str | None:
    """
    Next due value when a recurring item is completed.

    ``series_start`` is the first due date of the series; COUNT and weekly
    cycles are measured from it. It defaults to the current due date.

    Keeps the time of day of a timed due value. Returns None when the item
    does not repeat, its pattern has ended, or the due value is unreadable.
    """
    value = parse_date_value(due)
    pattern = parse_pattern(stored_pattern)
    if value is None or pattern is None:
        return None
    nxt = next_occurrence(pattern, series_start or value.day, value.day)
    if nxt is None:
        logger.info(f"Recurrence ended after {value.day.isoformat()}")
        return None
    return combine(nxt, value.time).to_iso()
