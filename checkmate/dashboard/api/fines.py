from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from checkmate.dashboard.dependencies import get_service, get_token
from checkmate.dashboard.models import FineCreate, FineUpdate, TextUpdate
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

def _fine_log(service: CheckmateService) -> Dict[str, Any]:
    state = service.state
    return {
        "fineRecords": [record.to_dict() for record in state.fine_records],
        "totalFine": state.total_fine,
        "bankInfo": state.bank_info,
        "fineNotice": state.fine_notice,
        "locked": service.admin.fine_section_locked,
    }

@router.get("", response_model=Dict[str, Any])
async def get_fines(service: CheckmateService = Depends(get_service)):
    return _fine_log(service)

@router.post("", response_model=Dict[str, Any], status_code=201)
async def add_fine(body: FineCreate, service: CheckmateService = Depends(get_service),
                   token: Optional[str] = Depends(get_token)):
    record = service.add_fine(token, body.date, body.amount, body.name, body.note)
    return record.to_dict()

@router.patch("/{index}", response_model=Dict[str, Any])
async def update_fine(index: int, body: FineUpdate, service: CheckmateService = Depends(get_service),
                      token: Optional[str] = Depends(get_token)):
    record = service.update_fine(token, index, **body.model_dump(exclude_none=True))
    return record.to_dict()

@router.delete("/{index}", response_model=Dict[str, Any])
async def remove_fine(index: int, service: CheckmateService = Depends(get_service),
                      token: Optional[str] = Depends(get_token)):
    service.remove_fine(token, index)
    return _fine_log(service)

@router.put("/bank-info", response_model=Dict[str, Any])
async def set_bank_info(body: TextUpdate, service: CheckmateService = Depends(get_service),
                        token: Optional[str] = Depends(get_token)):
    return {"bankInfo": service.set_bank_info(token, body.text)}

@router.put("/notice", response_model=Dict[str, Any])
async def set_fine_notice(body: TextUpdate, service: CheckmateService = Depends(get_service),
                          token: Optional[str] = Depends(get_token)):
    return {"fineNotice": service.set_fine_notice(token, body.text)}
