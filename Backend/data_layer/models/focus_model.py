from typing import ClassVar
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from data_layer.models.base_model import OwnedModel, calendar_day_field
from utils.validation_utils import require_text, validate_url


class FocusMode(str, Enum):
    FOCUS = "focus"
    BREAK = "break"


class FocusLog(OwnedModel):
    duration: int = Field(..., ge=0, description="Duration in minutes")
    mode: FocusMode = Field(FocusMode.FOCUS)
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")

    collection_name: ClassVar[str] = "focus_logs"

    @field_validator("date", mode="before")
    @classmethod
    def calendar_day(cls, v):
        return calendar_day_field(v)


class FocusDay(BaseModel):
    """Focus minutes logged on one calendar day."""
    date: str
    total_minutes: int = 0
    sessions: int = 0


class FocusSound(OwnedModel):
    label: str = Field(..., description="e.g. Binaural Alpha")
    url: str = Field(...)
    type: str = Field("youtube")

    collection_name: ClassVar[str] = "focus_sounds"

    @field_validator("label", "url")
    @classmethod
    def text_required(cls, v, info):
        return require_text(v, info.field_name)

    @field_validator("url")
    @classmethod
    def http_url(cls, v):
        if not validate_url(v):
            raise ValueError("url must be an http(s) link")
        return v
