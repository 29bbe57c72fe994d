from data_layer.models.task_model import Task
from .base_repo import BaseMongoRepository
from utils.datetime_utils import format_calendar_day, get_utc_now
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class TaskRepository(BaseMongoRepository[Task]):
    def __init__(self):
        super().__init__(Task)

    def find_by_user(self, user_id: str, sort=None) -> List[Task]:
        return self.find_many({"user_id": user_id},
                              sort=sort or [("date", 1), ("time", 1)])

    def create_task(self, task: Task) -> Task:
        return self.create(task)

    def copy_to_today(self, task: Task, today: Optional[str] = None) -> Task:
        """Persist a not-completed copy of a task dated today."""
        day = today or format_calendar_day(get_utc_now())
        copy = Task(
            user_id=task.user_id,
            text=task.text,
            time=task.time,
            category=task.category,
            custom_list=task.custom_list,
            difficulty=task.difficulty,
            link=task.link,
            date=day,
            completed=False,
        )
        created = self.create(copy)
        logger.info(f"Copied task {task.id} to {day} as {created.id}")
        return created

    def clear_custom_list(self, user_id: str, list_name: str) -> int:
        """Remove a custom list label from every task of the user; returns tasks touched."""
        return self.update_by_filter(
            {"user_id": user_id, "custom_list": list_name},
            {"custom_list": None},
        )
