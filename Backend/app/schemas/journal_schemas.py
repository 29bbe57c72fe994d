from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class JournalBase(BaseModel):
    date: str = Field(...)
    type: str = "daily"
    title: Optional[str] = None
    content: str = Field(...)


class JournalCreate(JournalBase):
    pass


class JournalUpdate(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None


class JournalResponse(JournalBase):
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class BulkImportResponse(BaseModel):
    imported: int
    failed: int
    errors: List[Dict[str, Any]] = []
    message: str
