from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from checkmate.core.history import CallField, CallRecordUpdate
from checkmate.dashboard.dependencies import get_service, parse_date_param
from checkmate.dashboard.models import (
    CallRecordPatch,
    DateSelection,
    HabitNotePatch,
    MatchingRequest,
    ToggleRequest,
)
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

def _current_view(service: CheckmateService) -> Dict[str, Any]:
    history = service.state.history
    return {
        "selectedDate": history.selected_key,
        "currentMates": [record.to_dict() for record in history.current_mates],
        "currentHabits": [record.to_dict() for record in history.current_habits],
    }

@router.post("/select", response_model=Dict[str, Any])
async def select_date(body: DateSelection, service: CheckmateService = Depends(get_service)):
    """
    Switch the current view to another day; days without records get the
    week's matching, or a new one
    """
    service.select_date(parse_date_param(body.date))
    return _current_view(service)

@router.post("/calls/{index}/toggle", response_model=Dict[str, Any])
async def toggle_call_check(index: int, body: Optional[ToggleRequest] = None,
                            service: CheckmateService = Depends(get_service)):
    day = parse_date_param(body.date) if body else None
    checked = service.toggle_call_check(index, day)
    return {"index": index, "progressCheck": checked}

@router.post("/habits/{participant_index}/checks/{check_index}/toggle", response_model=Dict[str, Any])
async def toggle_habit_check(participant_index: int, check_index: int, body: Optional[ToggleRequest] = None,
                             service: CheckmateService = Depends(get_service)):
    day = parse_date_param(body.date) if body else None
    checked = service.toggle_habit_check(participant_index, check_index, day)
    return {"participantIndex": participant_index, "checkIndex": check_index, "checked": checked}

@router.patch("/calls/{index}", response_model=Dict[str, Any])
async def update_call_record(index: int, body: CallRecordPatch, service: CheckmateService = Depends(get_service)):
    field = CallField(body.field)
    if field is CallField.PROGRESS:
        update = CallRecordUpdate.progress(bool(body.value))
    elif field is CallField.NAME:
        update = CallRecordUpdate.name(str(body.value))
    else:
        update = CallRecordUpdate.partner(str(body.value))
    return service.update_call_record(index, update).to_dict()

@router.patch("/habits/{index}/note", response_model=Dict[str, Any])
async def update_habit_note(index: int, body: HabitNotePatch, service: CheckmateService = Depends(get_service)):
    return service.update_habit_note(index, body.note).to_dict()

@router.post("/matching", response_model=Dict[str, Any])
async def apply_random_matching(body: Optional[MatchingRequest] = None,
                                service: CheckmateService = Depends(get_service)):
    """Re-draw the mate-call pairs for the whole selected week"""
    service.apply_random_matching(body.offset if body else None)
    return _current_view(service)

@router.post("/copy-week", response_model=Dict[str, Any])
async def copy_current_day_to_week(service: CheckmateService = Depends(get_service)):
    copied = service.copy_current_day_to_week()
    return {"copied": copied, **_current_view(service)}
