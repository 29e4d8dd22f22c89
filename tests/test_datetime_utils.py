"""
Tests for date keys, ISO weeks and calendar helpers.
"""

from datetime import date, timedelta

import pytest

from checkmate.utils.datetime_utils import (
    format_display,
    is_valid_key,
    iso_week_number,
    month_weeks,
    monday_of_week,
    parse_key,
    to_key,
    today,
    week_dates,
    week_keys,
    week_seed,
)


class TestIsoWeekNumber:

    def test_first_monday_of_2024_is_week_one(self):
        assert iso_week_number(date(2024, 1, 1)) == 1

    def test_new_years_day_2023_belongs_to_previous_year(self):
        assert iso_week_number(date(2023, 1, 1)) == 52

    def test_week_53(self):
        assert iso_week_number(date(2020, 12, 31)) == 53
        assert iso_week_number(date(2021, 1, 3)) == 53

    def test_matches_isocalendar(self):
        day = date(2019, 12, 1)
        while day < date(2026, 2, 1):
            assert iso_week_number(day) == day.isocalendar()[1], day
            day += timedelta(days=1)


class TestWeeks:

    def test_sunday_belongs_to_the_week_of_the_previous_monday(self):
        assert monday_of_week(date(2024, 1, 7)) == date(2024, 1, 1)
        assert monday_of_week(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_full_week(self):
        days = week_dates(date(2024, 1, 3))
        assert days[0] == date(2024, 1, 1)
        assert days[-1] == date(2024, 1, 7)
        assert len(days) == 7

    def test_workdays_only(self):
        assert week_keys(date(2024, 1, 6), workdays_only=True) == [
            "2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05",
        ]

    def test_week_seed_is_shared_by_the_whole_week(self):
        seeds = {week_seed(day) for day in week_dates(date(2024, 1, 3))}
        assert seeds == {202401}


class TestKeys:

    def test_round_trip(self):
        assert to_key(date(2024, 3, 9)) == "2024-03-09"
        assert parse_key("2024-03-09") == date(2024, 3, 9)

    def test_display_format(self):
        assert format_display(date(2024, 3, 9)) == "2024.03.09"

    @pytest.mark.parametrize("value", ["2024-13-01", "2024-02-30", "yesterday", "", None])
    def test_invalid_keys(self, value):
        assert not is_valid_key(value)

    def test_today_uses_the_timezone(self):
        assert isinstance(today("UTC"), date)


class TestMonthWeeks:

    def test_february_2024_rows(self):
        rows = month_weeks(2024, 2)
        assert len(rows) == 5
        assert rows[0][:4] == [None, None, None, None]
        assert rows[0][4] == date(2024, 2, 1)
        assert rows[-1][4] == date(2024, 2, 29)
        assert rows[-1][5:] == [None, None]

    def test_rows_are_sunday_first(self):
        for row in month_weeks(2024, 9):
            assert len(row) == 7
            first = next(day for day in row if day is not None)
            if row[0] is not None:
                assert first.weekday() == 6
