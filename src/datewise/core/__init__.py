"""Functional core - pure date logic with no I/O and no wall-clock access."""

from .errors import DatewiseError, ParseFailure, InvalidPattern, OutOfRange
from .calendar_math import add_days, day_of_week, days_in_month, clamp_day_of_month
from .date_values import DateOnly, Instant, DateValue, combine, parse_date_value, is_overdue
from .date_text import parse_date_text, commit_date_text
from .time_text import parse_time_text, commit_time_text, format_time
from .presets import Preset, PresetResult, resolve_preset, resolve_preset_label, quick_options
from .recurrence import (
    Frequency,
    Weekday,
    Never,
    Until,
    AfterCount,
    RecurrencePattern,
    serialize_pattern,
    parse_pattern,
    describe_pattern,
)
from .occurrences import occurrences, next_occurrence
from .calendar_grid import CalendarCell, build_month_grid, highlight_occurrences
from .edit_session import RecurrenceEditSession

__all__ = [
    # Errors
    "DatewiseError",
    "ParseFailure",
    "InvalidPattern",
    "OutOfRange",
    # Calendar math
    "add_days",
    "day_of_week",
    "days_in_month",
    "clamp_day_of_month",
    # Values
    "DateOnly",
    "Instant",
    "DateValue",
    "combine",
    "parse_date_value",
    "is_overdue",
    # Text parsing
    "parse_date_text",
    "commit_date_text",
    "parse_time_text",
    "commit_time_text",
    "format_time",
    # Presets
    "Preset",
    "PresetResult",
    "resolve_preset",
    "resolve_preset_label",
    "quick_options",
    # Recurrence
    "Frequency",
    "Weekday",
    "Never",
    "Until",
    "AfterCount",
    "RecurrencePattern",
    "serialize_pattern",
    "parse_pattern",
    "describe_pattern",
    "occurrences",
    "next_occurrence",
    "RecurrenceEditSession",
    # Grid
    "CalendarCell",
    "build_month_grid",
    "highlight_occurrences",
]
