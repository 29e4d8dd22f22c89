from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from checkmate.dashboard.dependencies import get_service, get_token, require_admin
from checkmate.dashboard.models import (
    CheckItemUpdate,
    LockRequest,
    PasswordRequest,
    PastDateEditRequest,
    SettingsUpdate,
    TokenResponse,
)
from checkmate.services.checkmate_service import CheckmateService

router = APIRouter()

@router.get("/status", response_model=Dict[str, Any])
async def admin_status(service: CheckmateService = Depends(get_service), token: Optional[str] = Depends(get_token)):
    return {
        "hasPassword": service.admin.has_password,
        "authenticated": service.admin.is_authenticated(token),
        "fineSectionLocked": service.admin.fine_section_locked,
        "pastDateEditAllowed": service.admin.past_date_edit_allowed,
    }

@router.post("/setup", response_model=TokenResponse)
async def setup_password(body: PasswordRequest, service: CheckmateService = Depends(get_service)):
    """First-time password setup; the caller is logged in right away"""
    return TokenResponse(token=service.setup_admin(body.password))

@router.post("/login", response_model=TokenResponse)
async def login(body: PasswordRequest, service: CheckmateService = Depends(get_service)):
    return TokenResponse(token=service.login(body.password))

@router.post("/logout", response_model=Dict[str, Any])
async def logout(service: CheckmateService = Depends(get_service), token: Optional[str] = Depends(get_token)):
    return {"loggedOut": service.logout(token)}

@router.put("/settings", response_model=Dict[str, Any])
async def update_settings(body: SettingsUpdate, service: CheckmateService = Depends(get_service),
                          token: str = Depends(require_admin)):
    return service.update_settings(token, **body.model_dump(exclude_none=True))

@router.put("/check-items/{index}", response_model=Dict[str, Any])
async def update_check_item(index: int, body: CheckItemUpdate, service: CheckmateService = Depends(get_service),
                            token: str = Depends(require_admin)):
    return service.update_check_item(token, index, label=body.label, weekly_goal=body.weekly_goal)

@router.put("/fine-lock", response_model=Dict[str, Any])
async def set_fine_lock(body: LockRequest, service: CheckmateService = Depends(get_service),
                        token: str = Depends(require_admin)):
    return {"locked": service.set_fine_section_locked(token, body.locked)}

@router.put("/past-date-edit", response_model=Dict[str, Any])
async def set_past_date_edit(body: PastDateEditRequest, service: CheckmateService = Depends(get_service),
                             token: str = Depends(require_admin)):
    """Allow or forbid toggling checks on days other than today"""
    return {"allowed": service.set_past_date_edit_allowed(token, body.allowed)}

@router.post("/reset", response_model=Dict[str, Any])
async def reset_data(service: CheckmateService = Depends(get_service), token: str = Depends(require_admin)):
    """Replace all data with the default document"""
    saved = await service.reset(token)
    return {"reset": True, "saved": saved}
