from fastapi import APIRouter, Depends, Query
from typing import Optional
from core.exceptions import ValidationError
from services.heatmap import Heatmap, HeatmapService, ViewMode
from utils.datetime_utils import normalize_calendar_day
from utils.jwt import extract_user_id_from_token
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/heatmap", tags=["Heatmap"])
heatmap_service = HeatmapService()


@router.get("", response_model=Heatmap)
def get_heatmap(mode: str = Query("overview", description="overview, tasks, focus, journal or habit"),
                habit_id: Optional[str] = Query(None),
                today: Optional[str] = Query(None, description="Viewer's calendar day"),
                user_id: str = Depends(extract_user_id_from_token)):
    try:
        view_mode = ViewMode.parse(mode, habit_id)
    except ValidationError as e:
        # Query problems surface like FastAPI's own parameter errors
        e.status_code = 422
        raise

    day = None
    if today:
        day = normalize_calendar_day(today)
        if day is None:
            raise ValidationError("today must be a calendar day in YYYY-MM-DD format",
                                  details={"today": today})

    if view_mode.habit_id:
        heatmap_service.habit_repo.find_owned(view_mode.habit_id, user_id)

    return heatmap_service.build(user_id, view_mode, day)
