#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - History Store
Date-keyed mate-call and habit histories with the current-day view

The current view of the selected date is the very list stored under that date,
so every edit to the view is already written through to history.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from checkmate.core.models import (
    CALL_ROWS,
    CallRecord,
    HabitRecord,
    Participant,
    Settings,
)
from checkmate.core.pairing import Pair, generate_pairs
from checkmate.utils.datetime_utils import to_key, week_dates, week_seed

logger = logging.getLogger(__name__)

MateHistory = Dict[str, List[CallRecord]]
HabitHistory = Dict[str, List[HabitRecord]]

# ===== FIELD UPDATES =====

class CallField(Enum):
    NAME = "mateName"
    PARTNER = "mateCallPartner"
    PROGRESS = "progressCheck"

@dataclass(frozen=True)
class CallRecordUpdate:
    field: CallField
    value: Union[str, bool]

    @classmethod
    def name(cls, value: str) -> "CallRecordUpdate":
        return cls(CallField.NAME, value)

    @classmethod
    def partner(cls, value: str) -> "CallRecordUpdate":
        return cls(CallField.PARTNER, value)

    @classmethod
    def progress(cls, value: bool) -> "CallRecordUpdate":
        return cls(CallField.PROGRESS, value)

class HabitField(Enum):
    NOTE = "note"
    CHECK = "customChecks"

@dataclass(frozen=True)
class HabitRecordUpdate:
    field: HabitField
    value: Union[str, bool]
    check_index: Optional[int] = None

    @classmethod
    def note(cls, value: str) -> "HabitRecordUpdate":
        return cls(HabitField.NOTE, value)

    @classmethod
    def check(cls, check_index: int, checked: bool) -> "HabitRecordUpdate":
        return cls(HabitField.CHECK, checked, check_index)

# ===== LEGACY MIGRATION =====

def migrate_legacy(daily_history: Dict[str, Any]) -> Tuple[MateHistory, HabitHistory]:
    """Split a combined per-day history into separate mate-call and habit histories"""
    mate_history: MateHistory = {}
    habit_history: HabitHistory = {}

    for day_key, records in daily_history.items():
        if not isinstance(records, list):
            logger.warning(f"Skipping legacy history entry {day_key}: not a list")
            continue
        rows = [record for record in records if isinstance(record, dict)]
        mate_history[day_key] = [CallRecord.from_dict(record) for record in rows]
        habit_history[day_key] = [HabitRecord.from_dict(record) for record in rows]

    return mate_history, habit_history

def history_from_dict(data: Any, record_type) -> Dict[str, list]:
    history = {}
    if not isinstance(data, dict):
        return history
    for day_key, records in data.items():
        if isinstance(records, list):
            history[day_key] = [record_type.from_dict(r) for r in records if isinstance(r, dict)]
    return history

def history_to_dict(history: Dict[str, list]) -> Dict[str, List[Dict[str, Any]]]:
    return {day_key: [record.to_dict() for record in records] for day_key, records in history.items()}

# ===== STORE =====

class HistoryStore:
    """
    Both histories plus the records bound to the selected date.

    The roster and settings are shared with the owning AppState and only read
    here, to build records for days that have none yet.
    """

    def __init__(self, roster: List[Participant], settings: Settings, selected_date: date,
                 mate_history: Optional[MateHistory] = None,
                 habit_history: Optional[HabitHistory] = None):
        self.roster = roster
        self.settings = settings
        self.mate_history: MateHistory = mate_history if mate_history is not None else {}
        self.habit_history: HabitHistory = habit_history if habit_history is not None else {}
        self.selected_date = selected_date
        self.current_mates: List[CallRecord] = self._mates_for(selected_date)
        self.current_habits: List[HabitRecord] = self._habits_for(selected_date)
        self.commit_view()

    @property
    def selected_key(self) -> str:
        return to_key(self.selected_date)

    # --- building records ---

    def build_call_records(self, pairs: Sequence[Pair]) -> List[CallRecord]:
        """Call rows for a matching; indices outside the active roster stay blank"""
        user_count = self.settings.user_count
        records = []
        for i, pair in enumerate(pairs):
            record = CallRecord(mate_id=str(i + 1))
            if 0 <= pair.caller_idx < user_count:
                record.mate_name = self.roster[pair.caller_idx].name
            if 0 <= pair.partner_idx < user_count:
                record.mate_call_partner = self.roster[pair.partner_idx].partner_label
            records.append(record)
        return records

    def fresh_habits(self) -> List[HabitRecord]:
        return [HabitRecord.blank(participant, self.settings.check_labels) for participant in self.roster]

    def roster_call_records(self) -> List[CallRecord]:
        return [CallRecord(mate_id=p.id, mate_name=p.name) for p in self.roster]

    def find_sibling(self, day: date) -> Optional[str]:
        """First other day of the same Mon-Sun week that already has mate-call records"""
        for sibling in week_dates(day):
            key = to_key(sibling)
            if sibling != day and key in self.mate_history:
                return key
        return None

    def _mates_for(self, day: date) -> List[CallRecord]:
        key = to_key(day)
        if key in self.mate_history:
            return self.mate_history[key]

        sibling = self.find_sibling(day)
        if sibling is not None:
            logger.debug(f"Inheriting matching for {key} from {sibling}")
            return [record.copy(progress_check=False) for record in self.mate_history[sibling]]

        pairs = generate_pairs(CALL_ROWS, self.settings.user_count, week_seed(day))
        return self.build_call_records(pairs)

    def _habits_for(self, day: date) -> List[HabitRecord]:
        return self.habit_history.get(to_key(day)) or self.fresh_habits()

    # --- reconciliation ---

    def commit_view(self) -> None:
        """Store the current view under the selected date"""
        self.mate_history[self.selected_key] = self.current_mates
        self.habit_history[self.selected_key] = self.current_habits

    def switch_date(self, old_date: date, new_date: date) -> None:
        if old_date != self.selected_date:
            raise ValueError(f"{to_key(old_date)} is not the selected date {self.selected_key}")
        old_key = to_key(old_date)
        self.mate_history[old_key] = self.current_mates
        self.habit_history[old_key] = self.current_habits

        self.selected_date = new_date
        self.current_mates = self._mates_for(new_date)
        self.current_habits = self._habits_for(new_date)
        self.commit_view()

    def select(self, new_date: date) -> None:
        self.switch_date(self.selected_date, new_date)

    def records_for(self, day: date, habits: bool = False) -> Optional[list]:
        """Current view for the selected date, stored history otherwise (None when absent)"""
        if day == self.selected_date:
            return self.current_habits if habits else self.current_mates
        history = self.habit_history if habits else self.mate_history
        return history.get(to_key(day))

    # --- checks ---

    def toggle_check(self, index: int, day: date) -> bool:
        """Flip a mate-call progress check; days without records are built from the roster"""
        key = to_key(day)
        if day == self.selected_date:
            records = self.current_mates
        else:
            records = self.mate_history.get(key)
            if records is None:
                records = self.roster_call_records()

        if not 0 <= index < len(records):
            raise IndexError(f"no mate-call row {index} on {key}")

        records[index].progress_check = not records[index].progress_check
        self.mate_history[key] = records
        return records[index].progress_check

    def toggle_habit_check(self, participant_index: int, check_index: int, day: date) -> bool:
        key = to_key(day)
        if day == self.selected_date:
            records = self.current_habits
        else:
            records = self.habit_history.get(key)
            if records is None:
                records = self.fresh_habits()

        if not 0 <= participant_index < len(records):
            raise IndexError(f"no habit row {participant_index} on {key}")
        checks = records[participant_index].custom_checks
        if not 0 <= check_index < len(checks):
            raise IndexError(f"no check item {check_index} on {key}")

        checks[check_index].checked = not checks[check_index].checked
        self.habit_history[key] = records
        return checks[check_index].checked

    # --- field updates on the current view ---

    def apply_call_update(self, index: int, update: CallRecordUpdate) -> CallRecord:
        if not 0 <= index < len(self.current_mates):
            raise IndexError(f"no mate-call row {index}")
        record = self.current_mates[index]
        if update.field is CallField.NAME:
            record.mate_name = str(update.value)
        elif update.field is CallField.PARTNER:
            record.mate_call_partner = str(update.value)
        elif update.field is CallField.PROGRESS:
            record.progress_check = bool(update.value)
        self.commit_view()
        return record

    def apply_habit_update(self, index: int, update: HabitRecordUpdate) -> HabitRecord:
        if not 0 <= index < len(self.current_habits):
            raise IndexError(f"no habit row {index}")
        record = self.current_habits[index]
        if update.field is HabitField.NOTE:
            record.note = str(update.value)
        elif update.field is HabitField.CHECK:
            if update.check_index is None or not 0 <= update.check_index < len(record.custom_checks):
                raise IndexError(f"no check item {update.check_index}")
            record.custom_checks[update.check_index].checked = bool(update.value)
        self.commit_view()
        return record

    def rename_participant(self, participant: Participant, old_name: str) -> None:
        """Carry a roster rename into the current view"""
        for record in self.current_habits:
            if record.mate_id == participant.id:
                record.mate_name = participant.name
        if old_name:
            for record in self.current_mates:
                if record.mate_name == old_name:
                    record.mate_name = participant.name
                if record.mate_call_partner == old_name:
                    record.mate_call_partner = participant.partner_label
        self.commit_view()

    def relabel_check(self, index: int, label: str) -> None:
        for record in self.current_habits:
            if 0 <= index < len(record.custom_checks):
                record.custom_checks[index].label = label
        self.commit_view()

    # --- whole-week operations ---

    def apply_random_matching(self, seed: int) -> List[CallRecord]:
        """
        Re-match the selected week with a new seed. Each day of the week gets
        the new rows while keeping its own progress checks.
        """
        base = self.build_call_records(generate_pairs(CALL_ROWS, self.settings.user_count, seed))
        for key in (to_key(day) for day in week_dates(self.selected_date)):
            existing = self.mate_history.get(key) or []
            self.mate_history[key] = [
                record.copy(progress_check=existing[i].progress_check if i < len(existing) else False)
                for i, record in enumerate(base)
            ]
        self.current_mates = self.mate_history[self.selected_key]
        logger.info(f"🔀 Re-matched week of {self.selected_key} (seed {seed})")
        return self.current_mates

    def copy_current_day_to_week(self) -> List[str]:
        """Copy the selected day's caller/partner names onto Mon-Fri of its week"""
        template = self.current_mates[:CALL_ROWS]
        copied = []
        for key in (to_key(day) for day in week_dates(self.selected_date, workdays_only=True)):
            previous = self.mate_history.get(key) or []
            self.mate_history[key] = [
                record.copy(progress_check=previous[i].progress_check if i < len(previous) else False)
                for i, record in enumerate(template)
            ]
            copied.append(key)
        if self.selected_key in copied:
            self.current_mates = self.mate_history[self.selected_key]
        return copied

    def has_data(self, day_key: str) -> bool:
        return day_key in self.mate_history or day_key in self.habit_history

