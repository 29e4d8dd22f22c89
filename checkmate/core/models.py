#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Core Data Models
Roster, daily records, fines and settings

Documents use the camelCase keys of the stored JSON; the dataclasses use
snake_case and convert in to_dict/from_dict.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from checkmate.utils.validators import coerce_amount, coerce_bool, coerce_int, coerce_str

logger = logging.getLogger(__name__)

# ===== CONSTANTS =====

MAX_PARTICIPANTS = 10
MAX_CHECK_ITEMS = 10
CALL_ROWS = 4

MIN_WEEKLY_GOAL = 1
MAX_WEEKLY_GOAL = 7

DEFAULT_CHECK_LABELS = [
    "Wake-up check",
    "Reading check",
    "Workout check",
]

def default_check_labels(count: int = MAX_CHECK_ITEMS) -> List[str]:
    return [
        DEFAULT_CHECK_LABELS[i] if i < len(DEFAULT_CHECK_LABELS) else f"Item {i + 1}"
        for i in range(count)
    ]

def check_item_id(index: int) -> str:
    return f"check-{index}"

# ===== VALIDATION =====

class ValidationError(Exception):
    """Invalid value for a model field"""
    pass

# ===== IDENTITY =====

@dataclass(frozen=True, order=True)
class ParticipantId:
    """Stable roster slot 0..9, rendered as the letters A..J"""
    value: int

    def __post_init__(self):
        if not isinstance(self.value, int) or not 0 <= self.value < MAX_PARTICIPANTS:
            raise ValidationError(f"participant id must be in 0..{MAX_PARTICIPANTS - 1}, got {self.value!r}")

    @property
    def letter(self) -> str:
        return chr(ord("A") + self.value)

    @classmethod
    def all(cls) -> List["ParticipantId"]:
        return [cls(i) for i in range(MAX_PARTICIPANTS)]

    def __str__(self) -> str:
        return self.letter

# ===== ROSTER =====

@dataclass
class Participant:
    id: str
    name: str = ""
    contact: str = ""

    @property
    def partner_label(self) -> str:
        """Name shown in a partner cell; unnamed slots fall back to their letter"""
        return self.name or f"Mate {self.id}"

    @property
    def display_name(self) -> str:
        return self.name or f"User {self.id}"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "contact": self.contact}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], slot: int) -> "Participant":
        # Older documents numbered the slots 1..10; the slot position wins
        return cls(
            id=ParticipantId(slot).letter,
            name=coerce_str(data.get("name")),
            contact=coerce_str(data.get("contact")),
        )

def empty_roster() -> List[Participant]:
    return [Participant(id=pid.letter) for pid in ParticipantId.all()]

def roster_from_list(items: Any) -> List[Participant]:
    """Always MAX_PARTICIPANTS entries; missing slots are blank"""
    roster = empty_roster()
    if isinstance(items, list):
        for slot, item in enumerate(items[:MAX_PARTICIPANTS]):
            if isinstance(item, dict):
                roster[slot] = Participant.from_dict(item, slot)
    return roster

# ===== DAILY RECORDS =====

@dataclass
class CheckItem:
    id: str
    label: str
    checked: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "checked": self.checked}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "CheckItem":
        return cls(
            id=coerce_str(data.get("id"), check_item_id(index)),
            label=coerce_str(data.get("label")),
            checked=coerce_bool(data.get("checked")),
        )

@dataclass
class CallRecord:
    """One mate-call row of a day: who calls whom and whether it happened"""
    mate_id: str
    mate_name: str = ""
    mate_call_partner: str = ""
    progress_check: bool = False

    def copy(self, progress_check: Optional[bool] = None) -> "CallRecord":
        return CallRecord(
            mate_id=self.mate_id,
            mate_name=self.mate_name,
            mate_call_partner=self.mate_call_partner,
            progress_check=self.progress_check if progress_check is None else progress_check,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mateId": self.mate_id,
            "mateName": self.mate_name,
            "mateCallPartner": self.mate_call_partner,
            "progressCheck": self.progress_check,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallRecord":
        return cls(
            mate_id=coerce_str(data.get("mateId")),
            mate_name=coerce_str(data.get("mateName")),
            mate_call_partner=coerce_str(data.get("mateCallPartner")),
            progress_check=coerce_bool(data.get("progressCheck")),
        )

@dataclass
class HabitRecord:
    """A participant's habit checklist for one day"""
    mate_id: str
    mate_name: str = ""
    custom_checks: List[CheckItem] = field(default_factory=list)
    note: str = ""

    def is_checked(self, check_index: int) -> bool:
        if 0 <= check_index < len(self.custom_checks):
            return self.custom_checks[check_index].checked
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mateId": self.mate_id,
            "mateName": self.mate_name,
            "customChecks": [check.to_dict() for check in self.custom_checks],
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HabitRecord":
        checks = data.get("customChecks")
        if not isinstance(checks, list):
            checks = []
        return cls(
            mate_id=coerce_str(data.get("mateId")),
            mate_name=coerce_str(data.get("mateName")),
            custom_checks=[
                CheckItem.from_dict(item, i) for i, item in enumerate(checks) if isinstance(item, dict)
            ],
            note=coerce_str(data.get("note")),
        )

    @classmethod
    def blank(cls, participant: Participant, labels: List[str]) -> "HabitRecord":
        return cls(
            mate_id=participant.id,
            mate_name=participant.name,
            custom_checks=[CheckItem(id=check_item_id(i), label=label) for i, label in enumerate(labels)],
        )

# ===== FINES =====

@dataclass
class FineRecord:
    date: str = ""
    amount: float = 0.0
    name: str = ""
    note: str = ""

    def __post_init__(self):
        self.amount = coerce_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        amount = int(self.amount) if float(self.amount).is_integer() else self.amount
        return {"date": self.date, "amount": amount, "name": self.name, "note": self.note}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FineRecord":
        return cls(
            date=coerce_str(data.get("date")),
            amount=coerce_amount(data.get("amount")),
            name=coerce_str(data.get("name")),
            note=coerce_str(data.get("note")),
        )

def total_fine(records: List[FineRecord]) -> float:
    return sum(record.amount for record in records)

# ===== SETTINGS =====

@dataclass
class Settings:
    user_count: int = 7
    check_item_count: int = 3
    check_labels: List[str] = field(default_factory=default_check_labels)
    check_weekly_count: List[int] = field(default_factory=lambda: [5] * MAX_CHECK_ITEMS)
    main_weekly_goal: int = 5
    is_settings_locked: bool = False
    is_user_info_locked: bool = False
    admin_password: Optional[str] = None

    def label(self, index: int) -> str:
        return self.check_labels[index]

    def active_labels(self) -> List[str]:
        return self.check_labels[:self.check_item_count]

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "userCount": self.user_count,
            "checkItemCount": self.check_item_count,
            "checkLabels": list(self.check_labels),
            "checkWeeklyCount": list(self.check_weekly_count),
            "mainWeeklyGoal": self.main_weekly_goal,
            "isSettingsLocked": self.is_settings_locked,
            "isUserInfoLocked": self.is_user_info_locked,
        }
        if self.admin_password:
            data["adminPassword"] = self.admin_password
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        defaults = cls()

        labels = list(defaults.check_labels)
        raw_labels = data.get("checkLabels")
        if isinstance(raw_labels, list):
            for i, label in enumerate(raw_labels[:MAX_CHECK_ITEMS]):
                labels[i] = coerce_str(label, labels[i])

        weekly = list(defaults.check_weekly_count)
        raw_weekly = data.get("checkWeeklyCount")
        if isinstance(raw_weekly, list):
            for i, value in enumerate(raw_weekly[:MAX_CHECK_ITEMS]):
                weekly[i] = coerce_int(value, weekly[i], MIN_WEEKLY_GOAL, MAX_WEEKLY_GOAL)

        password = data.get("adminPassword")
        return cls(
            user_count=coerce_int(data.get("userCount"), defaults.user_count, 1, MAX_PARTICIPANTS),
            check_item_count=coerce_int(data.get("checkItemCount"), defaults.check_item_count, 1, MAX_CHECK_ITEMS),
            check_labels=labels,
            check_weekly_count=weekly,
            main_weekly_goal=coerce_int(data.get("mainWeeklyGoal"), defaults.main_weekly_goal,
                                        MIN_WEEKLY_GOAL, MAX_WEEKLY_GOAL),
            is_settings_locked=coerce_bool(data.get("isSettingsLocked"), defaults.is_settings_locked),
            is_user_info_locked=coerce_bool(data.get("isUserInfoLocked"), defaults.is_user_info_locked),
            admin_password=coerce_str(password) if password else None,
        )
