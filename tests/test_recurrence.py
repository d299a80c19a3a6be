"""Tests for the recurrence pattern model and its stored-string codec."""

import itertools
import logging
from datetime import date

import pytest

from datewise.core.errors import InvalidPattern
from datewise.core.recurrence import (
    NEVER,
    AfterCount,
    Frequency,
    RecurrencePattern,
    Until,
    Weekday,
    describe_pattern,
    ordinal,
    parse_pattern,
    serialize_pattern,
)


def weekly(*days, **kwargs):
    return RecurrencePattern(Frequency.WEEKLY, weekdays=frozenset(days), **kwargs)


class TestRecurrencePattern:
    def test_defaults(self):
        pattern = RecurrencePattern(Frequency.DAILY)
        assert pattern.interval == 1
        assert pattern.weekdays == frozenset()
        assert pattern.end == NEVER

    def test_weekdays_coerced_to_weekday(self):
        pattern = RecurrencePattern(Frequency.WEEKLY, weekdays={1, 4})
        assert pattern.sorted_weekdays == [Weekday.MONDAY, Weekday.THURSDAY]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"frequency": Frequency.DAILY, "interval": 0},
            {"frequency": Frequency.DAILY, "interval": True},
            {"frequency": Frequency.DAILY, "weekdays": {Weekday.MONDAY}},
            {"frequency": Frequency.WEEKLY, "weekdays": {9}},
            {"frequency": Frequency.WEEKLY, "month_day": 5},
            {"frequency": Frequency.MONTHLY, "month_day": 32},
            {"frequency": Frequency.MONTHLY, "month_day": 0},
            {"frequency": Frequency.MONTHLY, "set_pos": 2},
            {"frequency": Frequency.MONTHLY, "set_pos": 6, "weekdays": {Weekday.TUESDAY}},
            {"frequency": Frequency.MONTHLY, "set_pos": 2, "weekdays": {Weekday.TUESDAY, Weekday.FRIDAY}},
            {"frequency": Frequency.MONTHLY, "set_pos": 2, "weekdays": {Weekday.TUESDAY}, "month_day": 3},
            {"frequency": "DAILY"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidPattern):
            RecurrencePattern(**kwargs)

    def test_end_conditions_validate(self):
        with pytest.raises(InvalidPattern):
            AfterCount(0)
        with pytest.raises(InvalidPattern):
            Until("2025-06-01")

    def test_invalid_pattern_is_a_value_error(self):
        with pytest.raises(ValueError):
            RecurrencePattern(Frequency.DAILY, interval=-1)


class TestSerializePattern:
    def test_none(self):
        assert serialize_pattern(None) is None

    def test_defaults_omitted(self):
        assert serialize_pattern(RecurrencePattern(Frequency.DAILY)) == "FREQ=DAILY"

    def test_fixed_key_order(self):
        pattern = weekly(Weekday.THURSDAY, Weekday.MONDAY, interval=2, end=AfterCount(6))
        assert serialize_pattern(pattern) == "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,TH;COUNT=6"

    def test_weekdays_sunday_first(self):
        assert serialize_pattern(weekly(Weekday.SATURDAY, Weekday.SUNDAY)) == "FREQ=WEEKLY;BYDAY=SU,SA"

    def test_last_day_until(self):
        pattern = RecurrencePattern(Frequency.MONTHLY, month_day=-1, end=Until(date(2025, 6, 1)))
        assert serialize_pattern(pattern) == "FREQ=MONTHLY;BYMONTHDAY=-1;UNTIL=2025-06-01"

    def test_set_pos(self):
        pattern = RecurrencePattern(Frequency.MONTHLY, weekdays={Weekday.TUESDAY}, set_pos=2)
        assert serialize_pattern(pattern) == "FREQ=MONTHLY;BYDAY=TU;BYSETPOS=2"


ROUND_TRIP = [
    RecurrencePattern(Frequency.DAILY),
    RecurrencePattern(Frequency.DAILY, interval=3, end=AfterCount(10)),
    RecurrencePattern(Frequency.WEEKLY),
    weekly(Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY, interval=2, end=Until(date(2025, 12, 31))),
    RecurrencePattern(Frequency.MONTHLY, end=AfterCount(1)),
    RecurrencePattern(Frequency.MONTHLY, month_day=-1),
    RecurrencePattern(Frequency.MONTHLY, interval=6, month_day=15),
    RecurrencePattern(Frequency.MONTHLY, weekdays={Weekday.FRIDAY}, set_pos=5),
    RecurrencePattern(Frequency.YEARLY, interval=2, end=Until(date(2030, 2, 28))),
]


class TestParsePattern:
    @pytest.mark.parametrize("pattern", ROUND_TRIP, ids=serialize_pattern)
    def test_round_trip(self, pattern):
        assert parse_pattern(serialize_pattern(pattern)) == pattern

    def test_round_trip_combinations(self):
        ends = [NEVER, Until(date(2025, 6, 1)), AfterCount(4)]
        for frequency, interval, end in itertools.product(Frequency, [1, 2, 12], ends):
            day_sets = [frozenset()]
            if frequency is Frequency.WEEKLY:
                day_sets += [frozenset({Weekday.SUNDAY}), frozenset(Weekday)]
            for days in day_sets:
                pattern = RecurrencePattern(frequency, interval=interval, weekdays=days, end=end)
                assert parse_pattern(serialize_pattern(pattern)) == pattern

    def test_key_order_and_case_are_normalised(self):
        pattern = parse_pattern("byday=th,mo;interval=2;freq=weekly")
        assert serialize_pattern(pattern) == "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,TH"

    def test_surrounding_whitespace(self):
        assert parse_pattern("  FREQ=DAILY ; COUNT=3 ") == RecurrencePattern(Frequency.DAILY, end=AfterCount(3))

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text):
        assert parse_pattern(text) is None

    @pytest.mark.parametrize(
        "text",
        [
            "garbage",
            "FREQ=HOURLY",
            "INTERVAL=2",
            "FREQ=DAILY;",
            "FREQ=DAILY;INTERVAL=0",
            "FREQ=DAILY;INTERVAL=abc",
            "FREQ=DAILY;INTERVAL=1.5",
            "FREQ=DAILY;FOO=1",
            "FREQ=DAILY;FREQ=WEEKLY",
            "FREQ=DAILY;BYDAY=MO",
            "FREQ=WEEKLY;BYDAY=XX",
            "FREQ=DAILY;UNTIL=2025-02-30",
            "FREQ=DAILY;UNTIL=2025-01-01;COUNT=3",
            "FREQ=DAILY;COUNT=0",
            "FREQ=MONTHLY;BYSETPOS=2",
            "FREQ=MONTHLY;BYMONTHDAY=32",
            "{not json",
            '{"freq": "hour"}',
            "[1, 2]",
        ],
    )
    def test_corrupt_input_means_no_recurrence(self, text):
        assert parse_pattern(text) is None

    @pytest.mark.parametrize(
        "text",
        [
            "FREQ=DAILY;INTERVAL=1" + "0" * 5000,
            "FREQ=MONTHLY;BYMONTHDAY=1" + "0" * 5000,
            '{"freq": "day", "interval": 1' + "0" * 5000 + "}",
            '{"freq": ' + "[" * 100000,
        ],
        ids=["long-interval", "long-month-day", "legacy-long-interval", "legacy-deep-nesting"],
    )
    def test_oversized_input_means_no_recurrence(self, text):
        assert parse_pattern(text) is None

    def test_corrupt_input_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="datewise.core.recurrence"):
            assert parse_pattern("FREQ=SOMETIMES") is None
        assert "Ignoring invalid recurrence pattern" in caplog.text


class TestLegacyJson:
    def test_weekly(self):
        pattern = parse_pattern(
            '{"freq": "week", "interval": 2, "byDay": ["MO", "TH"], "until": "2025-06-01", "reopenChecklist": false}'
        )
        assert pattern == weekly(Weekday.MONDAY, Weekday.THURSDAY, interval=2, end=Until(date(2025, 6, 1)))

    def test_monthly_set_pos(self):
        pattern = parse_pattern('{"freq": "month", "interval": 1, "bySetPos": 2, "byDay": "TU"}')
        assert pattern == RecurrencePattern(Frequency.MONTHLY, weekdays={Weekday.TUESDAY}, set_pos=2)

    def test_monthly_last_day(self):
        pattern = parse_pattern('{"freq": "month", "byMonthDay": -1}')
        assert pattern == RecurrencePattern(Frequency.MONTHLY, month_day=-1)

    def test_yearly_month_fields_dropped(self):
        pattern = parse_pattern('{"freq": "year", "byMonth": 3, "byMonthDay": 4}')
        assert pattern == RecurrencePattern(Frequency.YEARLY)

    def test_zero_interval_becomes_one(self):
        assert parse_pattern('{"freq": "day", "interval": 0}') == RecurrencePattern(Frequency.DAILY)

    def test_reserialized_in_canonical_form(self):
        assert serialize_pattern(parse_pattern('{"freq": "day", "interval": 3}')) == "FREQ=DAILY;INTERVAL=3"


class TestDescribePattern:
    def test_none(self):
        assert describe_pattern(None) == ""

    def test_daily(self):
        assert describe_pattern(RecurrencePattern(Frequency.DAILY)) == "Every day"
        assert describe_pattern(RecurrencePattern(Frequency.DAILY, interval=3)) == "Every 3 days"

    def test_weekly_days(self):
        pattern = weekly(Weekday.THURSDAY, Weekday.MONDAY, interval=2)
        assert describe_pattern(pattern) == "Every 2 weeks on Mon, Thu"

    def test_weekly_follows_anchor(self):
        assert describe_pattern(RecurrencePattern(Frequency.WEEKLY), date(2025, 1, 15)) == "Every week on Wed"

    def test_monthly_variants(self):
        assert describe_pattern(RecurrencePattern(Frequency.MONTHLY, month_day=-1)) == "Every month on the last day"
        assert (
            describe_pattern(RecurrencePattern(Frequency.MONTHLY, weekdays={Weekday.TUESDAY}, set_pos=2))
            == "Every month on the second Tuesday"
        )
        assert describe_pattern(RecurrencePattern(Frequency.MONTHLY), date(2025, 1, 22)) == "Every month on the 22nd"

    def test_yearly(self):
        assert describe_pattern(RecurrencePattern(Frequency.YEARLY), date(2024, 2, 29)) == "Every year on Feb 29"

    def test_end_conditions(self):
        assert (
            describe_pattern(RecurrencePattern(Frequency.DAILY, end=Until(date(2025, 6, 1))))
            == "Every day, until Jun 1, 2025"
        )
        assert describe_pattern(RecurrencePattern(Frequency.DAILY, end=AfterCount(1))) == "Every day, once"
        assert describe_pattern(RecurrencePattern(Frequency.DAILY, end=AfterCount(5))) == "Every day, 5 times"


@pytest.mark.parametrize(
    "n,expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"),
     (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st"), (111, "111th")],
)
def test_ordinal(n, expected):
    assert ordinal(n) == expected
