#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Weekly Aggregation
Rolling Mon-Sun counts of checks, goal classification and the reports built on them

Every report goes through weekly_count() and meets_goal(), so the monthly
calendar and the per-participant report always agree.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from checkmate.core.models import CALL_ROWS, Settings
from checkmate.core.state import AppState
from checkmate.utils.datetime_utils import (
    format_display,
    month_weeks,
    monday_of_week,
    to_key,
    week_dates,
)

# ===== METRICS =====

class MetricKind(Enum):
    CALL = "call"
    HABIT = "habit"

@dataclass(frozen=True)
class Metric:
    kind: MetricKind
    check_index: Optional[int] = None

    @classmethod
    def call(cls) -> "Metric":
        return cls(MetricKind.CALL)

    @classmethod
    def habit(cls, check_index: int) -> "Metric":
        return cls(MetricKind.HABIT, check_index)

    @property
    def is_habit(self) -> bool:
        return self.kind is MetricKind.HABIT

def day_flag(state: AppState, metric: Metric, participant_index: int, day: date) -> bool:
    """Whether the metric was checked that day; missing days and rows are unchecked"""
    records = state.history.records_for(day, habits=metric.is_habit)
    if not records or not 0 <= participant_index < len(records):
        return False
    record = records[participant_index]
    if metric.is_habit:
        return record.is_checked(metric.check_index)
    return record.progress_check

def weekly_flags(state: AppState, metric: Metric, participant_index: int, anchor: date) -> List[bool]:
    return [day_flag(state, metric, participant_index, day) for day in week_dates(anchor)]

def weekly_count(state: AppState, metric: Metric, participant_index: int, anchor: date) -> int:
    return sum(weekly_flags(state, metric, participant_index, anchor))

def goal_for(settings: Settings, metric: Metric) -> int:
    if metric.is_habit:
        return settings.check_weekly_count[metric.check_index]
    return settings.main_weekly_goal

def meets_goal(count: int, goal: int) -> bool:
    return count >= goal

# ===== REPORTS =====

def _metric_summary(state: AppState, metric: Metric, participant_index: int, anchor: date) -> Dict[str, Any]:
    flags = weekly_flags(state, metric, participant_index, anchor)
    count = sum(flags)
    goal = goal_for(state.settings, metric)
    return {"checks": flags, "count": count, "goal": goal, "met": meets_goal(count, goal)}

def participant_week_report(state: AppState, participant_index: int, anchor: date) -> Dict[str, Any]:
    """Weekly activity of one participant: mate-call row plus every active habit"""
    participant = state.participant(participant_index)
    days = week_dates(anchor)

    habits = []
    for check_index, label in enumerate(state.settings.active_labels()):
        summary = _metric_summary(state, Metric.habit(check_index), participant_index, anchor)
        summary["label"] = label
        habits.append(summary)

    return {
        "participant": participant.to_dict(),
        "weekStart": format_display(days[0]),
        "weekEnd": format_display(days[-1]),
        "days": [to_key(day) for day in days],
        "call": _metric_summary(state, Metric.call(), participant_index, anchor),
        "habits": habits,
    }

def missed_goal_names(state: AppState, anchor: date) -> List[str]:
    """Active participants whose mate-call count is below the main weekly goal"""
    goal = goal_for(state.settings, Metric.call())
    return [
        mate.display_name
        for index, mate in enumerate(state.active_mates)
        if not meets_goal(weekly_count(state, Metric.call(), index, anchor), goal)
    ]

def daily_missed_names(state: AppState, day: date) -> List[str]:
    records = state.history.records_for(day) or []
    return [r.mate_name for r in records[:CALL_ROWS] if r.mate_name and not r.progress_check]

def monthly_calendar(state: AppState, year: int, month: int) -> Dict[str, Any]:
    """Sunday-first month grid with per-day misses and per-week goal misses"""
    weeks = []
    for row in month_weeks(year, month):
        first_day = next(day for day in row if day is not None)
        cells = []
        for day in row:
            if day is None:
                cells.append(None)
                continue
            key = to_key(day)
            has_data = state.history.has_data(key)
            cells.append({
                "day": day.day,
                "date": key,
                "hasData": has_data,
                "selected": day == state.history.selected_date,
                "missed": daily_missed_names(state, day) if has_data else [],
            })
        weeks.append({
            "monday": to_key(monday_of_week(first_day)),
            "days": cells,
            "missedGoal": missed_goal_names(state, first_day),
        })
    return {"year": year, "month": month, "weeks": weeks}

def weekly_habit_matrix(state: AppState, anchor: date) -> List[Dict[str, Any]]:
    """Date x check item x participant grid of habit checks for the Mon-Sun week"""
    rows = []
    for day in week_dates(anchor):
        items = []
        for check_index, label in enumerate(state.settings.active_labels()):
            metric = Metric.habit(check_index)
            items.append({
                "label": label,
                "checked": [day_flag(state, metric, i, day) for i in range(len(state.active_mates))],
            })
        rows.append({"date": to_key(day), "items": items})
    return rows

def fine_summary(state: AppState) -> Dict[str, Any]:
    rows = []
    for mate in state.active_mates:
        fines = [record for record in state.fine_records if record.name == mate.name]
        rows.append({
            "id": mate.id,
            "name": mate.name,
            "total": sum(record.amount for record in fines),
            "count": len(fines),
        })
    return {"participants": rows, "total": state.total_fine, "count": len(state.fine_records)}
