from typing import Optional, ClassVar
from enum import Enum
from pydantic import Field, field_validator
from data_layer.models.base_model import OwnedModel, optional_calendar_day_field
from utils.validation_utils import require_text, validate_clock_format


class TaskCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    ESSENTIAL = "essential"
    CODE = "code"


class TaskDifficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Task(OwnedModel):
    text: str = Field(..., description="Task text")
    completed: bool = Field(False)
    date: Optional[str] = Field(None, description="Calendar day (YYYY-MM-DD)")
    time: Optional[str] = Field(None, description="Clock time (HH:MM)")
    category: TaskCategory = Field(TaskCategory.WORK)
    custom_list: Optional[str] = Field(
        None, description="User list label, e.g. College or Startup")
    difficulty: Optional[TaskDifficulty] = Field(None)
    link: Optional[str] = Field(None)

    collection_name: ClassVar[str] = "tasks"

    @field_validator("text")
    @classmethod
    def text_required(cls, v):
        return require_text(v, "text")

    @field_validator("date", mode="before")
    @classmethod
    def calendar_day(cls, v):
        return optional_calendar_day_field(v)

    @field_validator("custom_list", "link", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("time")
    @classmethod
    def clock_time(cls, v):
        if v is None or v == "":
            return None
        if not validate_clock_format(v):
            raise ValueError("time must be HH:MM")
        return v
