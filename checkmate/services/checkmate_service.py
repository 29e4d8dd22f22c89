#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Application Service
The single owner of the application state

Every mutation goes through CheckmateService and ends by marking the document
dirty, which arms the debounced save. Settings and locked roster edits pass
through the admin gate first.
"""

import logging
import random
from datetime import date
from typing import Any, Dict, List, Optional

from checkmate.config import CheckmateConfig
from checkmate.core import aggregation
from checkmate.core.aggregation import Metric
from checkmate.core.database import DatabaseError, Document, default_document
from checkmate.core.history import CallField, CallRecordUpdate, HabitRecordUpdate
from checkmate.core.models import (
    MAX_CHECK_ITEMS,
    MAX_PARTICIPANTS,
    MAX_WEEKLY_GOAL,
    MIN_WEEKLY_GOAL,
    CallRecord,
    FineRecord,
    HabitRecord,
    Participant,
    ValidationError,
)
from checkmate.core.state import AppState
from checkmate.services.admin import AdminGate
from checkmate.services.document_store import DocumentStore, LocalCache, create_document_store
from checkmate.services.sync_service import PersistenceSync
from checkmate.utils.datetime_utils import DEFAULT_TIMEZONE, to_key, today, week_seed
from checkmate.utils.validators import coerce_amount

logger = logging.getLogger(__name__)

RANDOM_OFFSET_RANGE = 10000

def _check_range(name: str, value: int, minimum: int, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not minimum <= value <= maximum:
        raise ValidationError(f"{name} must be between {minimum} and {maximum}, got {value!r}")
    return value

class CheckmateService:
    """Application controller"""

    def __init__(self, store: DocumentStore, cache: Optional[LocalCache] = None,
                 debounce_seconds: float = 1.5, timezone: str = DEFAULT_TIMEZONE):
        self.timezone = timezone
        self.state = AppState.default(self.today())
        self.sync = PersistenceSync(store, cache, self.state_document, debounce_seconds)
        self.admin = AdminGate(lambda: self.state.settings)
        self.load_source: Optional[str] = None

    @classmethod
    def from_config(cls, config: CheckmateConfig) -> "CheckmateService":
        return cls(
            store=create_document_store(config),
            cache=LocalCache(config.storage.cache_path),
            debounce_seconds=config.sync.debounce_seconds,
            timezone=config.sync.timezone,
        )

    def today(self) -> date:
        return today(self.timezone)

    # ===== LIFECYCLE =====

    async def initialize(self, selected_date: Optional[date] = None) -> str:
        """Load store -> cache -> defaults; returns where the document came from"""
        selected_date = selected_date or self.today()
        state, source = None, "defaults"
        async for document, candidate in self.sync.iter_documents():
            try:
                state = AppState.from_document(document, selected_date)
            except (DatabaseError, TypeError, ValueError) as e:
                logger.error(f"❌ Unusable document from {candidate}, skipping it: {e}")
                continue
            source = candidate
            break
        if state is None:
            logger.info("📄 No usable saved document, starting from defaults")
            state = AppState.from_document(default_document(), selected_date)

        self.state = state
        self.load_source = source
        logger.info(f"✅ Checkmate state ready ({source}), {self.state.settings.user_count} participants")
        return source

    async def rollover(self) -> bool:
        """Move the selection to the new day once the local date has changed"""
        current = self.today()
        if self.state.history.selected_date == current:
            return False
        self.select_date(current)
        logger.info(f"🌅 Rolled over to {to_key(current)}")
        return True

    async def shutdown(self) -> bool:
        self.sync.scheduler.cancel_all()
        saved = await self.sync.flush()
        logger.info("👋 Checkmate service stopped")
        return saved

    async def reset(self, token: Optional[str]) -> bool:
        """Replace everything with the default document and store it right away"""
        self.admin.require(token)
        self.state = AppState.from_document(default_document(), self.state.history.selected_date)
        self.admin.logout_all()
        logger.warning("⚠️ Data reset to defaults")
        return await self.sync.flush()

    def _changed(self) -> None:
        self.sync.mark_dirty()

    # ===== VIEWS =====

    def state_document(self) -> Document:
        return self.state.to_document()

    def snapshot(self) -> Dict[str, Any]:
        """Document plus the current view, without the admin password"""
        history = self.state.history
        data = self.state.to_document()
        data.pop("adminPassword", None)
        data.update({
            "hasAdminPassword": self.admin.has_password,
            "selectedDate": history.selected_key,
            "currentMates": [record.to_dict() for record in history.current_mates],
            "currentHabits": [record.to_dict() for record in history.current_habits],
            "totalFine": self.state.total_fine,
            "fineSectionLocked": self.admin.fine_section_locked,
            "pastDateEditAllowed": self.admin.past_date_edit_allowed,
            "saveStatus": self.sync.status.value,
        })
        return data

    # ===== DAILY RECORDS =====

    def select_date(self, day: date) -> str:
        self.state.history.select(day)
        self._changed()
        return self.state.history.selected_key

    def _editable_day(self, day: Optional[date]) -> date:
        day = day or self.state.history.selected_date
        self.admin.require_date_editable(day, self.today())
        return day

    def toggle_call_check(self, index: int, day: Optional[date] = None) -> bool:
        checked = self.state.history.toggle_check(index, self._editable_day(day))
        self._changed()
        return checked

    def toggle_habit_check(self, participant_index: int, check_index: int, day: Optional[date] = None) -> bool:
        checked = self.state.history.toggle_habit_check(participant_index, check_index, self._editable_day(day))
        self._changed()
        return checked

    def update_call_record(self, index: int, update: CallRecordUpdate) -> CallRecord:
        if update.field is CallField.PROGRESS:
            self._editable_day(None)
        record = self.state.history.apply_call_update(index, update)
        self._changed()
        return record

    def update_habit_note(self, index: int, note: str) -> HabitRecord:
        record = self.state.history.apply_habit_update(index, HabitRecordUpdate.note(note))
        self._changed()
        return record

    def apply_random_matching(self, offset: Optional[int] = None) -> List[CallRecord]:
        if offset is None:
            offset = random.randrange(RANDOM_OFFSET_RANGE)
        seed = week_seed(self.state.history.selected_date) + offset
        records = self.state.history.apply_random_matching(seed)
        self._changed()
        return records

    def copy_current_day_to_week(self) -> List[str]:
        copied = self.state.history.copy_current_day_to_week()
        logger.info(f"📋 Copied {self.state.history.selected_key} to {len(copied)} days")
        self._changed()
        return copied

    # ===== ROSTER =====

    def update_participant(self, index: int, token: Optional[str] = None,
                           name: Optional[str] = None, contact: Optional[str] = None) -> Participant:
        if self.state.settings.is_user_info_locked:
            self.admin.require(token)
        participant = self.state.participant(index)
        old_name = participant.name
        if contact is not None:
            participant.contact = contact
        if name is not None and name != old_name:
            participant.name = name
            self.state.history.rename_participant(participant, old_name)
        self._changed()
        return participant

    def confirm_user_info(self) -> List[CallRecord]:
        """Lock the roster and draw a fresh matching for the week"""
        self.state.settings.is_user_info_locked = True
        logger.info("🔒 User info confirmed")
        return self.apply_random_matching()

    # ===== SETTINGS =====

    def update_settings(self, token: Optional[str], user_count: Optional[int] = None,
                        check_item_count: Optional[int] = None, main_weekly_goal: Optional[int] = None,
                        is_settings_locked: Optional[bool] = None,
                        is_user_info_locked: Optional[bool] = None) -> Dict[str, Any]:
        self.admin.require(token)
        settings = self.state.settings
        if user_count is not None:
            settings.user_count = _check_range("userCount", user_count, 1, MAX_PARTICIPANTS)
        if check_item_count is not None:
            settings.check_item_count = _check_range("checkItemCount", check_item_count, 1, MAX_CHECK_ITEMS)
        if main_weekly_goal is not None:
            settings.main_weekly_goal = _check_range("mainWeeklyGoal", main_weekly_goal,
                                                     MIN_WEEKLY_GOAL, MAX_WEEKLY_GOAL)
        if is_settings_locked is not None:
            settings.is_settings_locked = is_settings_locked
        if is_user_info_locked is not None:
            settings.is_user_info_locked = is_user_info_locked
        self._changed()
        data = settings.to_dict()
        data.pop("adminPassword", None)
        return data

    def update_check_item(self, token: Optional[str], index: int, label: Optional[str] = None,
                          weekly_goal: Optional[int] = None) -> Dict[str, Any]:
        self.admin.require(token)
        settings = self.state.settings
        if not 0 <= index < MAX_CHECK_ITEMS:
            raise IndexError(f"no check item {index}")
        if label is not None:
            settings.check_labels[index] = label
            self.state.history.relabel_check(index, label)
        if weekly_goal is not None:
            settings.check_weekly_count[index] = _check_range("checkWeeklyCount", weekly_goal,
                                                              MIN_WEEKLY_GOAL, MAX_WEEKLY_GOAL)
        self._changed()
        return {"index": index, "label": settings.label(index), "weeklyGoal": settings.check_weekly_count[index]}

    # ===== ADMIN =====

    def setup_admin(self, password: str) -> str:
        token = self.admin.set_password(password)
        self._changed()
        return token

    def login(self, password: str) -> str:
        return self.admin.authenticate(password)

    def logout(self, token: Optional[str]) -> bool:
        return self.admin.logout(token)

    def set_fine_section_locked(self, token: Optional[str], locked: bool) -> bool:
        return self.admin.set_fine_section_locked(token, locked)

    def set_past_date_edit_allowed(self, token: Optional[str], allowed: bool) -> bool:
        return self.admin.set_past_date_edit_allowed(token, allowed)

    # ===== FINES =====

    def add_fine(self, token: Optional[str], fine_date: str, amount: float, name: str, note: str = "") -> FineRecord:
        self.admin.require_fine_access(token)
        record = FineRecord(date=fine_date, amount=amount, name=name, note=note)
        self.state.fine_records.append(record)
        logger.info(f"💸 Fine {record.amount:g} for {name or '-'}")
        self._changed()
        return record

    def update_fine(self, token: Optional[str], index: int, **fields) -> FineRecord:
        self.admin.require_fine_access(token)
        record = self.state.fine(index)
        for key in ("date", "name", "note"):
            if fields.get(key) is not None:
                setattr(record, key, fields[key])
        if fields.get("amount") is not None:
            record.amount = coerce_amount(fields["amount"])
        self._changed()
        return record

    def remove_fine(self, token: Optional[str], index: int) -> FineRecord:
        self.admin.require_fine_access(token)
        self.state.fine(index)
        record = self.state.fine_records.pop(index)
        self._changed()
        return record

    def set_bank_info(self, token: Optional[str], text: str) -> str:
        self.admin.require_fine_access(token)
        self.state.bank_info = text
        self._changed()
        return text

    def set_fine_notice(self, token: Optional[str], text: str) -> str:
        self.admin.require_fine_access(token)
        self.state.fine_notice = text
        self._changed()
        return text

    # ===== REPORTS =====

    def _anchor(self, anchor: Optional[date]) -> date:
        return anchor or self.state.history.selected_date

    def weekly_count(self, participant_index: int, check_index: Optional[int] = None,
                     anchor: Optional[date] = None) -> Dict[str, Any]:
        self.state.participant(participant_index)
        if check_index is None:
            metric = Metric.call()
        else:
            if not 0 <= check_index < MAX_CHECK_ITEMS:
                raise IndexError(f"no check item {check_index}")
            metric = Metric.habit(check_index)
        count = aggregation.weekly_count(self.state, metric, participant_index, self._anchor(anchor))
        goal = aggregation.goal_for(self.state.settings, metric)
        return {"count": count, "goal": goal, "met": aggregation.meets_goal(count, goal)}

    def participant_report(self, participant_index: int, anchor: Optional[date] = None) -> Dict[str, Any]:
        return aggregation.participant_week_report(self.state, participant_index, self._anchor(anchor))

    def monthly_calendar(self, year: int, month: int) -> Dict[str, Any]:
        if not 1 <= month <= 12:
            raise ValidationError(f"month must be between 1 and 12, got {month}")
        return aggregation.monthly_calendar(self.state, year, month)

    def habit_matrix(self, anchor: Optional[date] = None) -> List[Dict[str, Any]]:
        return aggregation.weekly_habit_matrix(self.state, self._anchor(anchor))

    def missed_goal_names(self, anchor: Optional[date] = None) -> List[str]:
        return aggregation.missed_goal_names(self.state, self._anchor(anchor))

    def fine_summary(self) -> Dict[str, Any]:
        return aggregation.fine_summary(self.state)
