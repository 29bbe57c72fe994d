from typing import ClassVar, List
from pydantic import Field, field_validator
from data_layer.models.base_model import OwnedModel, calendar_day_field
from utils.validation_utils import require_text


class Habit(OwnedModel):
    name: str = Field(..., description="Habit name")
    color: str = Field("emerald")
    completed_dates: List[str] = Field(
        default_factory=list, description="Calendar days the habit was done")

    collection_name: ClassVar[str] = "habits"

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return require_text(v, "name")

    @field_validator("completed_dates", mode="before")
    @classmethod
    def unique_days(cls, v):
        # Membership is binary; keep one sorted entry per day
        return sorted({calendar_day_field(day) for day in (v or [])})

    def is_done_on(self, day: str) -> bool:
        return day in self.completed_dates
