from fastapi import APIRouter, Body, Depends
from typing import List, Optional
from app.schemas.task_schemas import TaskCreate, TaskUpdate, TaskCopyRequest, TaskResponse, ClearListResponse
from core.config import settings
from core.exceptions import NotFoundError, ValidationError
from data_layer.repos.task_repo import TaskRepository
from data_layer.models.task_model import Task
from utils.datetime_utils import format_calendar_day, normalize_calendar_day, today_in
from utils.jwt import extract_user_id_from_token
from utils.logging_utils import get_audit_logger
import logging

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger("tasks", settings.log_dir)

router = APIRouter(prefix="/tasks", tags=["Tasks"])
task_repo = TaskRepository()


@router.get("", response_model=List[TaskResponse])
def list_tasks(user_id: str = Depends(extract_user_id_from_token)):
    tasks = task_repo.find_by_user(user_id)
    return [TaskResponse(**t.model_dump()) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(task: TaskCreate, user_id: str = Depends(extract_user_id_from_token)):
    task_data = task.model_dump()
    task_data["user_id"] = user_id
    created = task_repo.create_task(Task.validated(**task_data))
    return TaskResponse(**created.model_dump())


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, task: TaskUpdate, user_id: str = Depends(extract_user_id_from_token)):
    existing = task_repo.find_owned(task_id, user_id)
    changes = task.model_dump(exclude_unset=True)
    if not changes:
        return TaskResponse(**existing.model_dump())
    updated = task_repo.update_fields(existing, changes)
    return TaskResponse(**updated.model_dump())


@router.delete("/list/{list_name}", response_model=ClearListResponse)
def clear_custom_list(list_name: str, user_id: str = Depends(extract_user_id_from_token)):
    """Drop a custom list label; the tasks themselves stay."""
    updated = task_repo.clear_custom_list(user_id, list_name)
    audit_logger.info("Custom list cleared", user_id=user_id,
                      list_name=list_name, tasks=updated)
    return ClearListResponse(list_name=list_name, updated=updated)


@router.delete("/{task_id}")
def delete_task(task_id: str, user_id: str = Depends(extract_user_id_from_token)):
    task_repo.find_owned(task_id, user_id)
    if not task_repo.delete(task_id):
        raise NotFoundError("Task not found", details={"id": task_id})
    audit_logger.info("Task deleted", user_id=user_id, task_id=task_id)
    return {"success": True, "id": task_id}


@router.post("/{task_id}/copy", response_model=TaskResponse, status_code=201)
def copy_task_to_today(task_id: str,
                       body: Optional[TaskCopyRequest] = Body(None),
                       user_id: str = Depends(extract_user_id_from_token)):
    existing = task_repo.find_owned(task_id, user_id)

    day = format_calendar_day(today_in())
    if body is not None and body.date:
        day = normalize_calendar_day(body.date)
        if day is None:
            raise ValidationError("date must be a calendar day in YYYY-MM-DD format",
                                  details={"date": body.date})

    copy = task_repo.copy_to_today(existing, day)
    return TaskResponse(**copy.model_dump())
