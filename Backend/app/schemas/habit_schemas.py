from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class HabitCreate(BaseModel):
    name: str = Field(...)
    color: Optional[str] = None


class HabitToggle(BaseModel):
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")


class HabitResponse(BaseModel):
    id: str
    user_id: str
    name: str
    color: str
    completed_dates: List[str]
    created_at: datetime
    updated_at: datetime
