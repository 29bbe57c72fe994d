from fastapi import APIRouter, Depends
from typing import List, Optional
from app.schemas.focus_schemas import (
    FocusLogCreate, FocusLogResponse, FocusDayResponse, FocusSoundCreate, FocusSoundResponse)
from core.config import settings
from core.exceptions import NotFoundError
from data_layer.repos.focus_repo import FocusLogRepository, FocusSoundRepository
from data_layer.models.focus_model import FocusLog, FocusMode, FocusSound
from utils.jwt import extract_user_id_from_token
from utils.logging_utils import get_audit_logger
import logging

logger = logging.getLogger(__name__)
audit_logger = get_audit_logger("focus", settings.log_dir)

router = APIRouter(prefix="/focus", tags=["Focus"])
repo = FocusLogRepository()
sound_repo = FocusSoundRepository()


@router.get("", response_model=List[FocusDayResponse])
def focus_history(mode: Optional[FocusMode] = None,
                  user_id: str = Depends(extract_user_id_from_token)):
    """Minutes per day, newest first. Break sessions count unless `mode` narrows the totals."""
    return [FocusDayResponse(**day.model_dump()) for day in repo.daily_totals(user_id, mode)]


@router.post("", response_model=FocusLogResponse, status_code=201)
def log_focus_session(data: FocusLogCreate, user_id: str = Depends(extract_user_id_from_token)):
    log = repo.log_session(FocusLog.validated(user_id=user_id, **data.model_dump()))
    logger.info(f"Logged {log.duration} min {log.mode} session for {user_id} on {log.date}")
    return FocusLogResponse(**log.model_dump())


@router.get("/sounds", response_model=List[FocusSoundResponse])
def list_sounds(user_id: str = Depends(extract_user_id_from_token)):
    return [FocusSoundResponse(**s.model_dump()) for s in sound_repo.find_by_user(user_id)]


@router.post("/sounds", response_model=FocusSoundResponse, status_code=201)
def add_sound(data: FocusSoundCreate, user_id: str = Depends(extract_user_id_from_token)):
    sound_data = data.model_dump(exclude_none=True)
    sound = sound_repo.create(FocusSound.validated(user_id=user_id, **sound_data))
    return FocusSoundResponse(**sound.model_dump())


@router.delete("/sounds/{sound_id}")
def delete_sound(sound_id: str, user_id: str = Depends(extract_user_id_from_token)):
    sound_repo.find_owned(sound_id, user_id)
    if not sound_repo.delete(sound_id):
        raise NotFoundError("Sound not found", details={"id": sound_id})
    audit_logger.info("Focus sound deleted", user_id=user_id, sound_id=sound_id)
    return {"success": True, "id": sound_id}
