from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from checkmate.dashboard.dependencies import get_service, get_token
from checkmate.dashboard.models import ParticipantUpdate
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

@router.get("", response_model=List[Dict[str, Any]])
async def get_participants(service: CheckmateService = Depends(get_service)):
    return [mate.to_dict() for mate in service.state.active_mates]

@router.put("/{index}", response_model=Dict[str, Any])
async def update_participant(index: int, body: ParticipantUpdate, service: CheckmateService = Depends(get_service),
                             token: Optional[str] = Depends(get_token)):
    """
    Rename or re-contact a roster slot; once user info is confirmed only an
    admin may do this
    """
    participant = service.update_participant(index, token, name=body.name, contact=body.contact)
    return participant.to_dict()

@router.post("/confirm", response_model=Dict[str, Any])
async def confirm_user_info(service: CheckmateService = Depends(get_service)):
    records = service.confirm_user_info()
    return {
        "isUserInfoLocked": service.state.settings.is_user_info_locked,
        "currentMates": [record.to_dict() for record in records],
    }
