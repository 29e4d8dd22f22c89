"""
Tests for weekly counts, goal classification and the reports built on them.
"""

from datetime import date

from checkmate.core import aggregation
from checkmate.core.aggregation import Metric
from checkmate.core.models import FineRecord

WEDNESDAY = date(2024, 1, 3)
FRIDAY = date(2024, 1, 5)
SUNDAY = date(2024, 1, 7)
NEXT_MONDAY = date(2024, 1, 8)


def _check_mon_wed_fri(state, monday, metric):
    for day in (monday, WEDNESDAY, FRIDAY):
        if metric.is_habit:
            state.history.toggle_habit_check(0, metric.check_index, day)
        else:
            state.history.toggle_check(0, day)


class TestWeeklyCount:

    def test_call_checks_from_the_selected_day(self, state, monday):
        _check_mon_wed_fri(state, monday, Metric.call())
        assert aggregation.weekly_count(state, Metric.call(), 0, monday) == 3

    def test_same_count_from_any_day_of_the_week(self, state, monday):
        _check_mon_wed_fri(state, monday, Metric.call())
        assert aggregation.weekly_count(state, Metric.call(), 0, WEDNESDAY) == 3
        assert aggregation.weekly_count(state, Metric.call(), 0, SUNDAY) == 3

    def test_same_count_from_a_historical_anchor(self, state, monday):
        _check_mon_wed_fri(state, monday, Metric.call())
        state.history.select(NEXT_MONDAY)
        assert aggregation.weekly_count(state, Metric.call(), 0, FRIDAY) == 3
        assert aggregation.weekly_count(state, Metric.call(), 0, NEXT_MONDAY) == 0

    def test_habit_checks(self, state, monday):
        _check_mon_wed_fri(state, monday, Metric.habit(1))
        assert aggregation.weekly_count(state, Metric.habit(1), 0, SUNDAY) == 3
        assert aggregation.weekly_count(state, Metric.habit(0), 0, SUNDAY) == 0

    def test_missing_rows_count_as_unchecked(self, state, monday):
        assert aggregation.weekly_count(state, Metric.call(), 9, monday) == 0


class TestGoals:

    def test_goal_is_inclusive(self):
        assert aggregation.meets_goal(5, 5)
        assert not aggregation.meets_goal(4, 5)

    def test_goal_for_metric(self, state):
        state.settings.check_weekly_count[2] = 3
        state.settings.main_weekly_goal = 6
        assert aggregation.goal_for(state.settings, Metric.habit(2)) == 3
        assert aggregation.goal_for(state.settings, Metric.call()) == 6

    def test_missed_goal_names(self, state, monday):
        state.settings.main_weekly_goal = 3
        _check_mon_wed_fri(state, monday, Metric.call())
        missed = aggregation.missed_goal_names(state, monday)
        assert "User 1" not in missed
        assert len(missed) == state.settings.user_count - 1


class TestReports:

    def test_participant_week_report(self, state, monday):
        _check_mon_wed_fri(state, monday, Metric.habit(0))

        report = aggregation.participant_week_report(state, 0, WEDNESDAY)

        assert report["participant"]["name"] == "User 1"
        assert report["weekStart"] == "2024.01.01"
        assert report["weekEnd"] == "2024.01.07"
        assert len(report["habits"]) == 3
        wake_up = report["habits"][0]
        assert wake_up["label"] == "Wake-up check"
        assert wake_up["checks"] == [True, False, True, False, True, False, False]
        assert wake_up["count"] == 3
        assert wake_up["met"] is False

    def test_daily_missed_names(self, state, monday):
        state.history.toggle_check(0, monday)
        missed = aggregation.daily_missed_names(state, monday)
        assert missed == [r.mate_name for r in state.history.current_mates[1:]]

    def test_monthly_calendar(self, state, monday):
        calendar = aggregation.monthly_calendar(state, 2024, 1)

        assert len(calendar["weeks"]) == 5
        first_row = calendar["weeks"][0]["days"]
        assert first_row[0] is None
        assert first_row[1]["date"] == "2024-01-01"
        assert first_row[1]["hasData"] is True
        assert first_row[1]["selected"] is True
        assert first_row[2]["hasData"] is False
        assert first_row[2]["missed"] == []

    def test_weekly_habit_matrix(self, state, monday):
        state.history.toggle_habit_check(2, 0, monday)
        matrix = aggregation.weekly_habit_matrix(state, monday)
        assert [row["date"] for row in matrix][0] == "2024-01-01"
        assert len(matrix) == 7
        assert matrix[0]["items"][0]["checked"][2] is True
        assert len(matrix[0]["items"][0]["checked"]) == 7

    def test_fine_summary(self, state):
        state.fine_records.extend([
            FineRecord(date="2024-01-02", amount=1000, name="User 1"),
            FineRecord(date="2024-01-03", amount=500, name="User 1"),
            FineRecord(date="2024-01-03", amount=2000, name="User 4"),
        ])

        summary = aggregation.fine_summary(state)

        assert summary["total"] == 3500
        assert summary["count"] == 3
        assert summary["participants"][0] == {"id": "A", "name": "User 1", "total": 1500, "count": 2}
        assert summary["participants"][3]["total"] == 2000
