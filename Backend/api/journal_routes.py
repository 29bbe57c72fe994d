from fastapi import APIRouter, Body, Depends, Response
from typing import Any, List
from app.schemas.journal_schemas import JournalCreate, JournalUpdate, JournalResponse, BulkImportResponse
from core.config import settings
from core.exceptions import NotFoundError, ValidationError
from data_layer.repos.journal_repo import JournalRepository
from data_layer.models.journal_model import JournalEntry
from utils.jwt import extract_user_id_from_token
from utils.logging_utils import get_audit_logger
import logging

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger("journals", settings.log_dir)

router = APIRouter(prefix="/journals", tags=["Journals"])
journal_repo = JournalRepository()


@router.get("", response_model=List[JournalResponse])
def list_entries(user_id: str = Depends(extract_user_id_from_token)):
    entries = journal_repo.find_by_user(user_id)
    return [JournalResponse(**e.model_dump()) for e in entries]


@router.post("", response_model=JournalResponse, status_code=201)
def save_entry(entry: JournalCreate, response: Response,
               user_id: str = Depends(extract_user_id_from_token)):
    """Create an entry. A second daily entry for the same date updates the first."""
    entry_data = entry.model_dump()
    entry_data["user_id"] = user_id
    stored, created = journal_repo.save_entry(JournalEntry.validated(**entry_data))
    if not created:
        response.status_code = 200
        logger.info(f"Updated daily journal entry {stored.id} for {stored.date}")
    return JournalResponse(**stored.model_dump())


@router.post("/bulk", response_model=BulkImportResponse)
def bulk_import(entries: List[Any] = Body(...),
                user_id: str = Depends(extract_user_id_from_token)):
    """Import spreadsheet rows as daily entries, one at a time."""
    if not entries:
        raise ValidationError("No entries to import")
    result = journal_repo.bulk_import(user_id, entries)
    audit_logger.info("Journal bulk import", user_id=user_id,
                      imported=result["imported"], failed=result["failed"])
    return BulkImportResponse(**result)


@router.put("/{entry_id}", response_model=JournalResponse)
def update_entry(entry_id: str, entry: JournalUpdate,
                 user_id: str = Depends(extract_user_id_from_token)):
    existing = journal_repo.find_owned(entry_id, user_id)
    changes = entry.model_dump(exclude_unset=True)
    if not changes:
        return JournalResponse(**existing.model_dump())

    merged = JournalEntry.validated(**{**existing.model_dump(), **changes})
    if merged.is_daily:
        other = journal_repo.find_daily(user_id, merged.date)
        if other and other.id != existing.id:
            raise ValidationError(f"A daily entry for {merged.date} already exists",
                                  error_type="duplicate_daily_entry",
                                  details={"id": other.id, "date": merged.date})

    updated = journal_repo.update_fields(existing, changes)
    return JournalResponse(**updated.model_dump())


@router.delete("/{entry_id}")
def delete_entry(entry_id: str, user_id: str = Depends(extract_user_id_from_token)):
    journal_repo.find_owned(entry_id, user_id)
    if not journal_repo.delete(entry_id):
        raise NotFoundError("Journal entry not found", details={"id": entry_id})
    audit_logger.info("Journal entry deleted", user_id=user_id, entry_id=entry_id)
    return {"success": True, "id": entry_id}
