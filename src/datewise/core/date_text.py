"""Free-text date parsing - no I/O dependencies.

Parsing is an ordered chain of independent matchers. Each matcher returns a
date when it recognizes its form, None when the text is not its form, and
raises OutOfRange when the text has its form but names an impossible date
(e.g. ``2025-13-01``). OutOfRange stops the chain so a malformed numeric date
is never reinterpreted by a later, looser matcher.
"""

import logging
import re
from datetime import date, datetime
from typing import Callable

from dateutil import parser as date_parser

from .calendar_math import add_days, make_date
from .errors import OutOfRange

logger = logging.getLogger(__name__)

DEFAULT_PIVOT = 30

_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_MDY_SLASH_4 = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_MDY_SLASH_2 = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")
_MDY_DASH_4 = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_MDY_DASH_2 = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2})$")

_KEYWORD_OFFSETS = {"today": 0, "tomorrow": 1, "yesterday": -1}

Matcher = Callable[[str, date, int], date | None]


def expand_two_digit_year(yy: int, pivot: int = DEFAULT_PIVOT) -> int:
    """
    Expand a 2-digit year.

    With the default pivot of 30: 00-29 -> 2000-2029, 30-99 -> 1930-1999.
    """
    if 0 <= yy < pivot:
        return 2000 + yy
    if pivot <= yy <= 99:
        return 1900 + yy
    return yy


def match_keyword(s: str, today: date, pivot: int) -> date | None:
    offset = _KEYWORD_OFFSETS.get(s)
    if offset is None:
        return None
    return add_days(today, offset)


def match_iso(s: str, today: date, pivot: int) -> date | None:
    """YYYY-M-D with 1-2 digit month and day."""
    m = _ISO.match(s)
    if not m:
        return None
    return make_date(int(m[1]), int(m[2]), int(m[3]))


def match_mdy_4(s: str, today: date, pivot: int) -> date | None:
    """M/D/YYYY (US order)."""
    m = _MDY_SLASH_4.match(s) or _MDY_DASH_4.match(s)
    if not m:
        return None
    return make_date(int(m[3]), int(m[1]), int(m[2]))


def match_mdy_2(s: str, today: date, pivot: int) -> date | None:
    """M/D/YY with the 2-digit year pivoted."""
    m = _MDY_SLASH_2.match(s) or _MDY_DASH_2.match(s)
    if not m:
        return None
    return make_date(expand_two_digit_year(int(m[3]), pivot), int(m[1]), int(m[2]))


def match_natural(s: str, today: date, pivot: int) -> date | None:
    """
    Hand anything else to dateutil ("March 4 2025", "mar 4", "4 march").

    The text must name a month and a day; a missing year is taken from
    ``today``. Parsing against two defaults that differ in month and day
    shows whether dateutil filled either from the default, so bare times
    ("12:30"), lone numbers ("5") and weekday names are rejected.
    """
    try:
        first = date_parser.parse(s, default=datetime(today.year, 1, 1))
        second = date_parser.parse(s, default=datetime(today.year, 2, 2))
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first.date()


MATCHERS: tuple[Matcher, ...] = (
    match_keyword,
    match_iso,
    match_mdy_4,
    match_mdy_2,
    match_natural,
)


def parse_date_text(text: str | None, today: date, pivot: int = DEFAULT_PIVOT) -> date | None:
    """
    Parse typed date text relative to the caller's ``today``.

    Returns None when the text is empty or unparseable.
    """
    if not text:
        return None
    s = text.strip().lower()
    if not s:
        return None

    for matcher in MATCHERS:
        try:
            result = matcher(s, today, pivot)
        except OutOfRange as e:
            logger.debug(f"Rejected date text {text!r}: {e}")
            return None
        if result is not None:
            return result

    logger.debug(f"Unparseable date text: {text!r}")
    return None


def format_date_field(d: date | None) -> str:
    """Display text for a date input field."""
    return d.isoformat() if d else ""


def commit_date_text(
    text: str,
    last_valid: date | None,
    today: date,
    pivot: int = DEFAULT_PIVOT,
) -> tuple[date | None, str]:
    """
    Apply field text on blur.

    Returns (value, display_text). Empty text clears the field; unparseable
    text keeps ``last_valid`` and restores its display text.
    """
    if not text.strip():
        return None, ""
    parsed = parse_date_text(text, today, pivot)
    if parsed is None:
        return last_valid, format_date_field(last_valid)
    return parsed, format_date_field(parsed)
