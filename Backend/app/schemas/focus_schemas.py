from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from data_layer.models.focus_model import FocusMode


class FocusLogCreate(BaseModel):
    duration: int = Field(..., ge=0, description="Minutes")
    mode: FocusMode = FocusMode.FOCUS
    date: str = Field(...)


class FocusLogResponse(FocusLogCreate):
    id: str
    user_id: str
    created_at: datetime


class FocusDayResponse(BaseModel):
    date: str
    total_minutes: int
    sessions: int


class FocusSoundCreate(BaseModel):
    label: str
    url: str
    type: Optional[str] = "youtube"


class FocusSoundResponse(BaseModel):
    id: str
    user_id: str
    label: str
    url: str
    type: str
    created_at: datetime
