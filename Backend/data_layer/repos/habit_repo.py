from data_layer.models.habit_model import Habit
from .base_repo import BaseMongoRepository, to_object_id
from core.exceptions import NotFoundError
from utils.datetime_utils import get_utc_now
from pymongo import ReturnDocument
from typing import List
import logging

logger = logging.getLogger(__name__)


class HabitRepository(BaseMongoRepository[Habit]):
    def __init__(self):
        super().__init__(Habit)

    def find_by_user(self, user_id: str, sort=None) -> List[Habit]:
        return self.find_many({"user_id": user_id},
                              sort=sort or [("created_at", 1)])

    def toggle_date(self, habit_id: str, day: str) -> Habit:
        """
        Flip membership of a day in completed_dates.

        Each branch is a single conditional update, so concurrent toggles
        never leave a duplicate day behind.
        """
        obj_id = to_object_id(habit_id)
        if obj_id is None:
            raise NotFoundError("Habit not found", details={"id": habit_id})

        collection = self.get_collection()
        now = get_utc_now()
        result = collection.find_one_and_update(
            {"_id": obj_id, "completed_dates": {"$ne": day}},
            {"$addToSet": {"completed_dates": day}, "$set": {"updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if result is None:
            result = collection.find_one_and_update(
                {"_id": obj_id, "completed_dates": day},
                {"$pull": {"completed_dates": day}, "$set": {"updated_at": now}},
                return_document=ReturnDocument.AFTER,
            )
        if result is None:
            raise NotFoundError("Habit not found", details={"id": habit_id})

        habit = self.model_class.from_mongodb(result)
        logger.debug(
            f"Habit {habit_id} {'done' if habit.is_done_on(day) else 'undone'} on {day}")
        return habit
