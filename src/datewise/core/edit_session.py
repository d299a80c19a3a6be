"""Recurrence edit session - no I/O dependencies.

A session snapshots a stored pattern string into a private draft when the
editor opens. Edits only touch the draft; ``save()`` hands back the whole new
stored value and ``cancel()`` hands back the original, so the stored value is
never partially updated.
"""

import logging
from dataclasses import replace
from datetime import date

from .calendar_math import day_of_week
from .errors import InvalidPattern
from .recurrence import (
    EndCondition,
    Frequency,
    RecurrencePattern,
    Weekday,
    describe_pattern,
    parse_pattern,
    serialize_pattern,
)

logger = logging.getLogger(__name__)


def default_pattern_for(frequency: Frequency, anchor: date | None = None) -> RecurrencePattern:
    """Starting pattern when a frequency is picked; weekly starts on the anchor's weekday."""
    if frequency is Frequency.WEEKLY and anchor is not None:
        return RecurrencePattern(frequency, weekdays=frozenset({Weekday(day_of_week(anchor))}))
    return RecurrencePattern(frequency)


class RecurrenceEditSession:
    """Draft state for the recurrence editor."""

    def __init__(self, stored: str | None, anchor: date | None = None):
        self.original = stored
        self.anchor = anchor
        self.draft = parse_pattern(stored)
        self.closed = False

    @classmethod
    def load(cls, stored: str | None, anchor: date | None = None) -> "RecurrenceEditSession":
        """Open a session on a stored value (None or corrupt = does not repeat)."""
        return cls(stored, anchor)

    def _check_open(self) -> None:
        if self.closed:
            raise RuntimeError("Recurrence edit session is closed")

    def _apply(self, **changes) -> bool:
        self._check_open()
        if self.draft is None:
            return False
        try:
            self.draft = replace(self.draft, **changes)
        except InvalidPattern as e:
            logger.debug(f"Ignored recurrence edit {changes}: {e}")
            return False
        return True

    def set_frequency(self, frequency: Frequency | None) -> None:
        """Pick a frequency, or None for "does not repeat". Interval and end carry over."""
        self._check_open()
        if frequency is None:
            self.draft = None
            return
        if self.draft is not None and self.draft.frequency is frequency:
            return
        fresh = default_pattern_for(frequency, self.anchor)
        if self.draft is not None:
            fresh = replace(fresh, interval=self.draft.interval, end=self.draft.end)
        self.draft = fresh

    def set_interval(self, interval: int) -> bool:
        return self._apply(interval=interval)

    def toggle_weekday(self, weekday: Weekday) -> bool:
        """Add or remove a weekday; the last remaining weekday stays on."""
        self._check_open()
        if self.draft is None or self.draft.frequency is not Frequency.WEEKLY:
            return False
        days = set(self.draft.weekdays)
        if not days and self.anchor is not None:
            days = {Weekday(day_of_week(self.anchor))}
        if weekday in days:
            if len(days) == 1:
                return False
            days.remove(weekday)
        else:
            days.add(weekday)
        return self._apply(weekdays=frozenset(days))

    def set_month_day(self, month_day: int | None) -> bool:
        """Monthly on a fixed day (1-31, -1 for last day), or None for the anchor's day."""
        return self._apply(month_day=month_day, set_pos=None, weekdays=frozenset())

    def set_month_position(self, set_pos: int, weekday: Weekday) -> bool:
        """Monthly on the n-th weekday, e.g. (2, TUESDAY) for the second Tuesday."""
        return self._apply(set_pos=set_pos, weekdays=frozenset({weekday}), month_day=None)

    def set_end(self, end: EndCondition) -> bool:
        return self._apply(end=end)

    @property
    def is_dirty(self) -> bool:
        return serialize_pattern(self.draft) != serialize_pattern(parse_pattern(self.original))

    def describe(self) -> str:
        return describe_pattern(self.draft, self.anchor)

    def save(self) -> str | None:
        """Close the session and return the new stored value (None = does not repeat)."""
        self._check_open()
        self.closed = True
        return serialize_pattern(self.draft)

    def cancel(self) -> str | None:
        """Close the session and return the original stored value untouched."""
        self._check_open()
        self.closed = True
        return self.original
