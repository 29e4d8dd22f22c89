from typing import Any, Dict

from fastapi import APIRouter, Depends

from checkmate.dashboard.dependencies import get_service
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

@router.get("", response_model=Dict[str, Any])
async def get_state(service: CheckmateService = Depends(get_service)):
    """
    Whole document with the selected day's records, without the admin password
    """
    return service.snapshot()

@router.get("/status", response_model=Dict[str, Any])
async def get_sync_status(service: CheckmateService = Depends(get_service)):
    stats = service.sync.stats()
    stats["loadSource"] = service.load_source
    return stats
