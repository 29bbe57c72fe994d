from data_layer.models.journal_model import JournalEntry, DAILY_ENTRY
from .base_repo import BaseMongoRepository
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
from typing import Any, Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class JournalRepository(BaseMongoRepository[JournalEntry]):
    def __init__(self):
        super().__init__(JournalEntry)

    def find_by_user(self, user_id: str, sort=None) -> List[JournalEntry]:
        return self.find_many({"user_id": user_id},
                              sort=sort or [("date", -1), ("created_at", -1)])

    def find_daily(self, user_id: str, date: str) -> Optional[JournalEntry]:
        return self.find_one({"user_id": user_id, "date": date, "type": DAILY_ENTRY})

    def save_entry(self, entry: JournalEntry) -> Tuple[JournalEntry, bool]:
        """
        Store an entry. A daily entry for a date that already has one
        overwrites the title and content of the existing entry.

        Returns:
            The stored entry and whether it was newly created.
        """
        if entry.is_daily:
            existing = self.find_daily(entry.user_id, entry.date)
            if existing:
                updated = self.update_fields(
                    existing, {"title": entry.title, "content": entry.content})
                return updated, False
        return self.create(entry), True

    def bulk_import(self, user_id: str, raw_entries: List[Any]) -> Dict[str, Any]:
        """
        Import many daily entries one at a time.

        A bad record is counted as failed and never aborts the batch.
        A date that already has a daily entry counts as failed too.
        """
        imported = 0
        errors: List[Dict[str, Any]] = []

        for index, raw in enumerate(raw_entries):
            if not isinstance(raw, dict):
                errors.append({"index": index, "error": "entry must be an object"})
                continue

            data = {k: v for k, v in raw.items() if k not in ("_id", "id", "user_id")}
            data["type"] = DAILY_ENTRY
            try:
                entry = JournalEntry(user_id=user_id, **data)
            except PydanticValidationError as e:
                errors.append({"index": index,
                               "error": "; ".join(err["msg"] for err in e.errors())})
                continue

            if self.find_daily(user_id, entry.date):
                errors.append({"index": index,
                               "error": f"daily entry for {entry.date} already exists"})
                continue

            try:
                self.insert(entry)
                imported += 1
            except DuplicateKeyError:
                errors.append({"index": index,
                               "error": f"daily entry for {entry.date} already exists"})
            except PyMongoError as e:
                logger.error(f"❌ Failed to import journal entry {index}: {e}")
                errors.append({"index": index, "error": "storage error"})

        failed = len(errors)
        logger.info(
            f"Bulk journal import for {user_id}: {imported} imported, {failed} failed")
        return {
            "imported": imported,
            "failed": failed,
            "errors": errors,
            "message": f"Imported {imported} entries, {failed} failed",
        }
