from fastapi import APIRouter, Depends
from typing import List
from app.schemas.habit_schemas import HabitCreate, HabitToggle, HabitResponse
from core.config import settings
from core.exceptions import FutureDateError, NotFoundError, ValidationError
from data_layer.repos.habit_repo import HabitRepository
from data_layer.models.habit_model import Habit
from utils.datetime_utils import latest_calendar_day, normalize_calendar_day
from utils.jwt import extract_user_id_from_token
from utils.logging_utils import get_audit_logger
import logging

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger("habits", settings.log_dir)

router = APIRouter(prefix="/habits", tags=["Habits"])
habit_repo = HabitRepository()


def check_toggle_date(value: str) -> str:
    """
    A toggle date must be a calendar day that has already started
    somewhere on Earth. The client clock is not trusted.
    """
    day = normalize_calendar_day(value)
    if day is None or len(value.strip()) != len(day):
        raise ValidationError("date must be a calendar day in YYYY-MM-DD format",
                              details={"date": value})
    latest = latest_calendar_day()
    if day > latest:
        raise FutureDateError(f"Cannot mark {day} before it happens",
                              details={"date": day, "latest": latest})
    return day


@router.get("", response_model=List[HabitResponse])
def list_habits(user_id: str = Depends(extract_user_id_from_token)):
    return [HabitResponse(**h.model_dump()) for h in habit_repo.find_by_user(user_id)]


@router.post("", response_model=HabitResponse, status_code=201)
def create_habit(data: HabitCreate, user_id: str = Depends(extract_user_id_from_token)):
    habit = Habit.validated(
        user_id=user_id,
        name=data.name,
        color=data.color or settings.default_habit_color,
        completed_dates=[],
    )
    created = habit_repo.create(habit)
    logger.info(f"✅ Created habit {created.id} '{created.name}' for {user_id}")
    return HabitResponse(**created.model_dump())


@router.put("/{habit_id}/toggle", response_model=HabitResponse)
def toggle_habit(habit_id: str, data: HabitToggle, user_id: str = Depends(extract_user_id_from_token)):
    day = check_toggle_date(data.date)
    habit_repo.find_owned(habit_id, user_id)
    habit = habit_repo.toggle_date(habit_id, day)
    return HabitResponse(**habit.model_dump())


@router.delete("/{habit_id}")
def delete_habit(habit_id: str, user_id: str = Depends(extract_user_id_from_token)):
    """Delete a habit and its completion history. Other records are untouched."""
    habit = habit_repo.find_owned(habit_id, user_id)
    if not habit_repo.delete(habit_id):
        raise NotFoundError("Habit not found", details={"id": habit_id})
    audit_logger.info("Habit deleted", user_id=user_id, habit_id=habit_id,
                      name=habit.name, completed_days=len(habit.completed_dates))
    return {"success": True, "id": habit_id}
