"""
Tests for the history store: view reconciliation, lazy day creation,
week-wide matching and legacy splitting.
"""

from datetime import date

import pytest

from checkmate.core.history import (
    CallRecordUpdate,
    HabitRecordUpdate,
    history_to_dict,
    migrate_legacy,
)
from checkmate.core.models import CALL_ROWS
from checkmate.core.pairing import generate_pairs
from checkmate.utils.datetime_utils import week_keys, week_seed


def _names(records):
    return [(r.mate_name, r.mate_call_partner) for r in records]


class TestViewReconciliation:

    def test_selected_day_is_committed_on_creation(self, state, monday):
        history = state.history
        assert "2024-01-01" in history.mate_history
        assert history.mate_history["2024-01-01"] is history.current_mates
        assert len(history.current_mates) == CALL_ROWS

    def test_switching_to_the_same_date_changes_nothing(self, state, monday):
        history = state.history
        history.toggle_check(0, monday)
        before = (history_to_dict(history.mate_history), history_to_dict(history.habit_history))

        history.switch_date(monday, monday)

        after = (history_to_dict(history.mate_history), history_to_dict(history.habit_history))
        assert before == after

    def test_switch_from_a_date_that_is_not_selected(self, state, monday):
        history = state.history
        with pytest.raises(ValueError):
            history.switch_date(date(2024, 1, 3), date(2024, 1, 4))
        assert "2024-01-03" not in history.mate_history
        assert history.selected_date == monday

    def test_edits_survive_a_round_trip(self, state, monday):
        history = state.history
        history.apply_habit_update(2, HabitRecordUpdate.note("ran 5k"))
        history.select(date(2024, 1, 10))
        history.select(monday)
        assert history.current_habits[2].note == "ran 5k"

    def test_first_matching_uses_the_week_seed(self, state, monday):
        expected = state.history.build_call_records(generate_pairs(CALL_ROWS, 7, week_seed(monday)))
        assert _names(state.history.current_mates) == _names(expected)

    def test_unknown_week_day_inherits_the_matching(self, state, monday):
        history = state.history
        history.toggle_check(0, monday)
        monday_rows = _names(history.current_mates)

        history.select(date(2024, 1, 3))

        assert _names(history.current_mates) == monday_rows
        assert not any(r.progress_check for r in history.current_mates)

    def test_new_day_gets_fresh_habits(self, state):
        history = state.history
        history.select(date(2024, 2, 5))
        assert len(history.current_habits) == 10
        assert all(not check.checked for r in history.current_habits for check in r.custom_checks)


class TestToggles:

    def test_toggle_on_selected_day(self, state, monday):
        assert state.history.toggle_check(1, monday) is True
        assert state.history.current_mates[1].progress_check is True
        assert state.history.toggle_check(1, monday) is False

    def test_toggle_on_day_without_records_uses_the_roster(self, state):
        friday = date(2024, 1, 5)
        state.history.toggle_check(0, friday)
        records = state.history.mate_history["2024-01-05"]
        assert len(records) == 10
        assert records[0].mate_name == "User 1"
        assert records[0].progress_check is True

    def test_toggle_habit_check_on_other_day(self, state):
        tuesday = date(2024, 1, 2)
        assert state.history.toggle_habit_check(3, 1, tuesday) is True
        assert state.history.habit_history["2024-01-02"][3].is_checked(1)

    def test_out_of_range_rows(self, state, monday):
        with pytest.raises(IndexError):
            state.history.toggle_check(CALL_ROWS, monday)
        with pytest.raises(IndexError):
            state.history.toggle_habit_check(0, 10, monday)


class TestFieldUpdates:

    def test_call_record_update(self, state):
        record = state.history.apply_call_update(0, CallRecordUpdate.partner("Mina"))
        assert record.mate_call_partner == "Mina"
        assert state.history.mate_history["2024-01-01"][0].mate_call_partner == "Mina"

    def test_habit_check_update(self, state):
        record = state.history.apply_habit_update(0, HabitRecordUpdate.check(2, True))
        assert record.is_checked(2)

    def test_unknown_row(self, state):
        with pytest.raises(IndexError):
            state.history.apply_call_update(7, CallRecordUpdate.progress(True))

    def test_rename_follows_the_participant(self, state):
        participant = state.mates[0]
        old_name = participant.name
        participant.name = "Alice"

        state.history.rename_participant(participant, old_name)

        assert state.history.current_habits[0].mate_name == "Alice"
        assert all(r.mate_name != old_name for r in state.history.current_mates)
        assert all(r.mate_call_partner != old_name for r in state.history.current_mates)

    def test_relabel_check(self, state):
        state.history.relabel_check(0, "Meditation")
        assert all(r.custom_checks[0].label == "Meditation" for r in state.history.current_habits)


class TestWeekOperations:

    def test_random_matching_covers_the_week_and_keeps_checks(self, state, monday):
        history = state.history
        history.toggle_check(2, monday)

        records = history.apply_random_matching(week_seed(monday) + 17)

        assert records is history.current_mates
        for key in week_keys(monday):
            assert _names(history.mate_history[key]) == _names(records)
        assert history.current_mates[2].progress_check is True

    def test_copy_to_week_covers_workdays(self, state, monday):
        history = state.history
        history.apply_call_update(0, CallRecordUpdate.name("Captain"))

        copied = history.copy_current_day_to_week()

        assert copied == week_keys(monday, workdays_only=True)
        assert history.mate_history["2024-01-05"][0].mate_name == "Captain"
        assert "2024-01-06" not in history.mate_history

    def test_has_data(self, state):
        assert state.history.has_data("2024-01-01")
        assert not state.history.has_data("2023-12-31")


class TestLegacyMigration:

    def test_split_combined_history(self):
        legacy = {
            "2024-01-01": [{
                "mateId": "1",
                "mateName": "Kim",
                "mateCallPartner": "Lee",
                "progressCheck": True,
                "customChecks": [{"id": "check-0", "label": "Wake-up check", "checked": True}],
                "note": "early",
            }],
            "broken": "not a list",
        }

        mates, habits = migrate_legacy(legacy)

        assert list(mates) == ["2024-01-01"]
        assert mates["2024-01-01"][0].progress_check is True
        assert mates["2024-01-01"][0].mate_call_partner == "Lee"
        assert habits["2024-01-01"][0].note == "early"
        assert habits["2024-01-01"][0].is_checked(0)
