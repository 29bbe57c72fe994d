from data_layer.repos.base_repo import BaseMongoRepository
from data_layer.models.focus_model import FocusLog, FocusDay, FocusMode, FocusSound
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class FocusLogRepository(BaseMongoRepository[FocusLog]):
    def __init__(self):
        super().__init__(FocusLog)

    def log_session(self, log: FocusLog) -> FocusLog:
        return self.create(log)

    def daily_totals(self, user_id: str, mode: Optional[FocusMode] = None) -> List[FocusDay]:
        """Minutes and session counts per day, newest first. Every mode counts unless `mode` is given."""
        match = {"user_id": user_id}
        if mode is not None:
            match["mode"] = FocusMode(mode).value
        pipeline = [
            {"$match": match},
            {"$group": {
                "_id": "$date",
                "total_minutes": {"$sum": "$duration"},
                "sessions": {"$sum": 1},
            }},
            {"$sort": {"_id": -1}},
        ]
        rows = self.get_collection().aggregate(pipeline)
        return [
            FocusDay(date=row["_id"],
                     total_minutes=row.get("total_minutes", 0),
                     sessions=row.get("sessions", 0))
            for row in rows
            if row.get("_id")
        ]


class FocusSoundRepository(BaseMongoRepository[FocusSound]):
    def __init__(self):
        super().__init__(FocusSound)

    def find_by_user(self, user_id: str, sort=None) -> List[FocusSound]:
        return self.find_many({"user_id": user_id},
                              sort=sort or [("created_at", -1)])
