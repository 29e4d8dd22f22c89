from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from checkmate.dashboard.dependencies import get_service, parse_date_param
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

@router.get("/weekly-count", response_model=Dict[str, Any])
async def get_weekly_count(
    participant: int = Query(..., ge=0),
    check: Optional[int] = Query(None, ge=0),
    anchor: Optional[str] = Query(None),
    service: CheckmateService = Depends(get_service)
):
    """
    Checks in the Mon-Sun week containing `anchor` (default: the selected day).
    Without `check` the mate-call progress is counted.
    """
    return service.weekly_count(participant, check, parse_date_param(anchor))

@router.get("/participants/{index}", response_model=Dict[str, Any])
async def get_participant_report(
    index: int,
    anchor: Optional[str] = Query(None),
    service: CheckmateService = Depends(get_service)
):
    return service.participant_report(index, parse_date_param(anchor))

@router.get("/calendar/{year}/{month}", response_model=Dict[str, Any])
async def get_monthly_calendar(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    service: CheckmateService = Depends(get_service)
):
    return service.monthly_calendar(year, month)

@router.get("/habit-matrix", response_model=List[Dict[str, Any]])
async def get_habit_matrix(anchor: Optional[str] = Query(None), service: CheckmateService = Depends(get_service)):
    return service.habit_matrix(parse_date_param(anchor))

@router.get("/missed-goal", response_model=Dict[str, Any])
async def get_missed_goal(anchor: Optional[str] = Query(None), service: CheckmateService = Depends(get_service)):
    return {"names": service.missed_goal_names(parse_date_param(anchor))}

@router.get("/fines", response_model=Dict[str, Any])
async def get_fine_summary(service: CheckmateService = Depends(get_service)):
    return service.fine_summary()
