from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from data_layer.models.task_model import TaskCategory, TaskDifficulty


class TaskBase(BaseModel):
    text: str = Field(...)
    completed: bool = False
    date: Optional[str] = None
    time: Optional[str] = None
    category: TaskCategory = TaskCategory.WORK
    custom_list: Optional[str] = None
    difficulty: Optional[TaskDifficulty] = None
    link: Optional[str] = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    date: Optional[str] = None
    time: Optional[str] = None
    category: Optional[TaskCategory] = None
    custom_list: Optional[str] = None
    difficulty: Optional[TaskDifficulty] = None
    link: Optional[str] = None


class TaskCopyRequest(BaseModel):
    date: Optional[str] = Field(
        None, description="Target day; the server's today when omitted")


class TaskResponse(TaskBase):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime


class ClearListResponse(BaseModel):
    list_name: str
    updated: int
