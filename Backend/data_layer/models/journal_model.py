from typing import ClassVar
from pydantic import Field, field_validator
from data_layer.models.base_model import OwnedModel, calendar_day_field
from utils.validation_utils import require_text

DAILY_ENTRY = "daily"


class JournalEntry(OwnedModel):
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")
    type: str = Field(
        DAILY_ENTRY, description="'daily', 'code', or a custom label like 'Project X'")
    title: str = Field("Untitled Entry")
    content: str = Field(...)

    collection_name: ClassVar[str] = "journals"

    @field_validator("date", mode="before")
    @classmethod
    def calendar_day(cls, v):
        return calendar_day_field(v)

    @field_validator("content")
    @classmethod
    def content_required(cls, v):
        return require_text(v, "content")

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v):
        if v is None or not str(v).strip():
            return DAILY_ENTRY
        return v

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v):
        if v is None or not str(v).strip():
            return "Untitled Entry"
        return v

    @property
    def is_daily(self) -> bool:
        return self.type == DAILY_ENTRY
