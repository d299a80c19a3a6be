"""Tests for free-text date parsing."""

from datetime import date

import pytest

from datewise.core.date_text import (
    commit_date_text,
    expand_two_digit_year,
    match_iso,
    match_mdy_2,
    parse_date_text,
)


@pytest.fixture
def today():
    return date(2025, 1, 15)


class TestParseDateText:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2025-3-4", date(2025, 3, 4)),
            ("2025-03-04", date(2025, 3, 4)),
            ("3/4/2025", date(2025, 3, 4)),
            ("3/4/25", date(2025, 3, 4)),
            ("3/4/87", date(1987, 3, 4)),
            ("1/1/30", date(1930, 1, 1)),
            ("12-25-2025", date(2025, 12, 25)),
            ("12-25-29", date(2029, 12, 25)),
            ("2024-02-29", date(2024, 2, 29)),
        ],
    )
    def test_numeric_forms(self, today, text, expected):
        assert parse_date_text(text, today) == expected

    def test_keywords(self, today):
        assert parse_date_text("Today", today) == date(2025, 1, 15)
        assert parse_date_text(" TOMORROW ", today) == date(2025, 1, 16)
        assert parse_date_text("yesterday", today) == date(2025, 1, 14)

    def test_month_names(self, today):
        assert parse_date_text("March 4, 2025", today) == date(2025, 3, 4)

    def test_month_name_without_year_uses_current_year(self, today):
        assert parse_date_text("mar 4", today) == date(2025, 3, 4)

    @pytest.mark.parametrize("text", ["not a date", "garbage", "", "   ", None])
    def test_unparseable(self, today, text):
        assert parse_date_text(text, today) is None

    @pytest.mark.parametrize("text", ["2025-13-01", "2/30/2025", "2025-02-29", "13/1/25"])
    def test_impossible_dates_are_rejected(self, today, text):
        """Out-of-range numeric dates are not reinterpreted by the natural-language fallback."""
        assert parse_date_text(text, today) is None

    @pytest.mark.parametrize("text", ["12:30", "5", "march", "2025", "3pm"])
    def test_text_without_month_and_day(self, today, text):
        assert parse_date_text(text, today) is None

    def test_month_name_with_time(self, today):
        assert parse_date_text("mar 4 3pm", today) == date(2025, 3, 4)

    def test_custom_pivot(self, today):
        assert parse_date_text("3/4/35", today) == date(1935, 3, 4)
        assert parse_date_text("3/4/35", today, pivot=40) == date(2035, 3, 4)


class TestExpandTwoDigitYear:
    def test_below_pivot(self):
        assert expand_two_digit_year(0) == 2000
        assert expand_two_digit_year(29) == 2029

    def test_at_and_above_pivot(self):
        assert expand_two_digit_year(30) == 1930
        assert expand_two_digit_year(99) == 1999


class TestMatchers:
    def test_iso_ignores_other_forms(self, today):
        assert match_iso("3/4/25", today, 30) is None

    def test_two_digit_ignores_four_digit_years(self, today):
        assert match_mdy_2("3/4/2025", today, 30) is None


class TestCommitDateText:
    def test_valid_text(self, today):
        assert commit_date_text("3/4/25", None, today) == (date(2025, 3, 4), "2025-03-04")

    def test_invalid_text_restores_last_valid(self, today):
        last = date(2025, 3, 4)
        assert commit_date_text("garbage", last, today) == (last, "2025-03-04")

    def test_invalid_text_without_last_valid(self, today):
        assert commit_date_text("garbage", None, today) == (None, "")

    def test_empty_text_clears(self, today):
        assert commit_date_text("  ", date(2025, 3, 4), today) == (None, "")
