"""
Request and response models of the Checkmate API
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from checkmate.core.models import MAX_PARTICIPANTS, MAX_CHECK_ITEMS, MAX_WEEKLY_GOAL, MIN_WEEKLY_GOAL
from checkmate.utils.datetime_utils import is_valid_key

class CamelModel(BaseModel):
    """Accepts the camelCase keys of the document as well as snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

def _check_date_key(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_key(value):
        raise ValueError("date must be YYYY-MM-DD")
    return value

# ===== HISTORY =====

class DateSelection(CamelModel):
    date: str

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        return _check_date_key(v)

class ToggleRequest(CamelModel):
    date: Optional[str] = None

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        return _check_date_key(v)

class CallRecordPatch(CamelModel):
    field: Literal["mateName", "mateCallPartner", "progressCheck"]
    value: Any

    @field_validator('value')
    @classmethod
    def validate_value(cls, v):
        if not isinstance(v, (str, bool)):
            raise ValueError("value must be a string or a boolean")
        return v

class HabitNotePatch(CamelModel):
    note: str = Field(..., max_length=2000)

class MatchingRequest(CamelModel):
    offset: Optional[int] = Field(None, ge=0)

# ===== ROSTER & SETTINGS =====

class ParticipantUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=50)
    contact: Optional[str] = Field(None, max_length=50)

class SettingsUpdate(CamelModel):
    user_count: Optional[int] = Field(None, ge=1, le=MAX_PARTICIPANTS)
    check_item_count: Optional[int] = Field(None, ge=1, le=MAX_CHECK_ITEMS)
    main_weekly_goal: Optional[int] = Field(None, ge=MIN_WEEKLY_GOAL, le=MAX_WEEKLY_GOAL)
    is_settings_locked: Optional[bool] = None
    is_user_info_locked: Optional[bool] = None

class CheckItemUpdate(CamelModel):
    label: Optional[str] = Field(None, min_length=1, max_length=50)
    weekly_goal: Optional[int] = Field(None, ge=MIN_WEEKLY_GOAL, le=MAX_WEEKLY_GOAL)

# ===== ADMIN =====

class PasswordRequest(CamelModel):
    password: str

class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"

class LockRequest(CamelModel):
    locked: bool

class PastDateEditRequest(CamelModel):
    allowed: bool

# ===== FINES =====

class FineCreate(CamelModel):
    date: str = ""
    amount: float = Field(0, ge=0)
    name: str = ""
    note: str = ""

class FineUpdate(CamelModel):
    date: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    name: Optional[str] = None
    note: Optional[str] = None

class TextUpdate(CamelModel):
    text: str = Field("", max_length=2000)

# ===== SERVICE =====

class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Optional[Dict[str, Any]] = None
