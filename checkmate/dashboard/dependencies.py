#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Dashboard Dependencies
Service and admin-token providers for the FastAPI routes
"""

import logging
from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from checkmate.services.admin import AdminRequiredError
from checkmate.services.checkmate_service import CheckmateService
from checkmate.utils.datetime_utils import is_valid_key, parse_key

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

def get_service(request: Request) -> CheckmateService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service not initialized")
    return service

def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[str]:
    """Bearer token of the admin session, if the request carries one"""
    if not credentials:
        return None
    return credentials.credentials

def require_admin(
    service: CheckmateService = Depends(get_service),
    token: Optional[str] = Depends(get_token),
) -> str:
    if not service.admin.is_authenticated(token):
        raise AdminRequiredError("Admin login required.")
    return token

def parse_date_param(value: Optional[str]) -> Optional[date]:
    """YYYY-MM-DD query parameter; None passes through"""
    if value is None:
        return None
    if not is_valid_key(value):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Invalid date {value!r}")
    return parse_key(value)
