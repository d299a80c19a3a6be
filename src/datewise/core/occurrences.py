"""Recurrence expansion - no I/O dependencies.

Every occurrence is computed from the anchor (step k is anchor + k
intervals), never from the previous occurrence, so clamping a month-end
anchor in a short month does not drift later occurrences.
"""

from datetime import MAXYEAR, date
from typing import Iterator

from .calendar_math import (
    add_days,
    add_months,
    clamped_date,
    day_of_week,
    nth_weekday_of_month,
    start_of_week,
)
from .recurrence import AfterCount, Frequency, RecurrencePattern, Until


def _daily(pattern: RecurrencePattern, anchor: date) -> Iterator[date]:
    k = 0
    while True:
        try:
            yield add_days(anchor, k * pattern.interval)
        except OverflowError:
            return
        k += 1


def _weekly(pattern: RecurrencePattern, anchor: date) -> Iterator[date]:
    days = pattern.sorted_weekdays or [day_of_week(anchor)]
    first_week = start_of_week(anchor)
    k = 0
    while True:
        try:
            week = add_days(first_week, 7 * pattern.interval * k)
        except OverflowError:
            return
        for weekday in days:
            try:
                d = add_days(week, int(weekday))
            except OverflowError:
                return
            if d >= anchor:
                yield d
        k += 1


def _monthly(pattern: RecurrencePattern, anchor: date) -> Iterator[date]:
    day = pattern.month_day if pattern.month_day is not None else anchor.day
    k = 0
    while True:
        year, month = add_months(anchor.year, anchor.month, k * pattern.interval)
        if year > MAXYEAR:
            return
        if pattern.set_pos is not None:
            d = nth_weekday_of_month(year, month, int(pattern.sorted_weekdays[0]), pattern.set_pos)
        else:
            d = clamped_date(year, month, day)
        if d >= anchor:
            yield d
        k += 1


def _yearly(pattern: RecurrencePattern, anchor: date) -> Iterator[date]:
    k = 0
    while True:
        year = anchor.year + k * pattern.interval
        if year > MAXYEAR:
            return
        # Feb 29 anchors land on Feb 28 in non-leap years
        yield clamped_date(year, anchor.month, anchor.day)
        k += 1


_EXPANDERS = {
    Frequency.DAILY: _daily,
    Frequency.WEEKLY: _weekly,
    Frequency.MONTHLY: _monthly,
    Frequency.YEARLY: _yearly,
}


def iter_occurrences(pattern: RecurrencePattern, anchor: date) -> Iterator[date]:
    """
    Lazily yield occurrences in ascending order, honouring the end condition.

    Unbounded for patterns that never end; callers must bound iteration.
    """
    emitted = 0
    for d in _EXPANDERS[pattern.frequency](pattern, anchor):
        if isinstance(pattern.end, Until) and d > pattern.end.day:
            return
        yield d
        emitted += 1
        if isinstance(pattern.end, AfterCount) and emitted >= pattern.end.count:
            return


def occurrences(
    pattern: RecurrencePattern | None,
    anchor: date,
    window_start: date,
    window_end: date,
) -> list[date]:
    """
    Occurrences of a pattern within [window_start, window_end], inclusive.

    Occurrences before the window still count towards an AfterCount end. The
    result is sorted and never contains dates before the anchor.
    """
    if pattern is None or window_start > window_end:
        return []
    results = []
    for d in iter_occurrences(pattern, anchor):
        if d > window_end:
            break
        if d >= window_start:
            results.append(d)
    return results


def next_occurrence(pattern: RecurrencePattern | None, anchor: date, after: date) -> date | None:
    """
    First occurrence strictly after ``after``.

    Returns None when the pattern has ended. Used to roll a completed
    recurring item forward to its next due date.
    """
    if pattern is None:
        return None
    for d in iter_occurrences(pattern, anchor):
        if d > after:
            return d
    return None
