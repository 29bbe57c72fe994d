from datetime import date
from typing import List, Optional, Union
from pydantic import BaseModel, Field
from services.heatmap.aggregator import DateWindow, HeatmapRecords, aggregate
from services.heatmap.grid_builder import MONTHS_SHOWN, MonthGrid, build_grid, first_month_shown
from services.heatmap.view_mode import ViewKind, ViewMode
from core.config import settings
from utils.datetime_utils import parse_calendar_day
from data_layer.repos import TaskRepository, JournalRepository, FocusLogRepository, HabitRepository
import logging

logger = logging.getLogger(__name__)


class Heatmap(BaseModel):
    mode: str
    label: str
    total: int = 0
    months: List[MonthGrid] = Field(default_factory=list)


def heatmap_window(today: date, months: int = MONTHS_SHOWN) -> DateWindow:
    """Days a heatmap ending today can show; nothing after today counts."""
    return DateWindow(start=first_month_shown(today, months), end=today)


def build_heatmap(records: HeatmapRecords, mode: ViewMode,
                  today: Optional[Union[date, str]] = None,
                  months: int = MONTHS_SHOWN) -> Heatmap:
    if today is None:
        today = date.today()
    elif not isinstance(today, date):
        today = parse_calendar_day(today)

    result = aggregate(records, mode, heatmap_window(today, months))
    return Heatmap(
        mode=str(mode),
        label=result.label,
        total=result.total,
        months=build_grid(result.counts_by_date, mode, today, months),
    )


class HeatmapService:
    """Loads one user's records from the stores and builds a heatmap."""

    def __init__(self, task_repo=None, journal_repo=None, focus_repo=None, habit_repo=None):
        self.task_repo = task_repo or TaskRepository()
        self.journal_repo = journal_repo or JournalRepository()
        self.focus_repo = focus_repo or FocusLogRepository()
        self.habit_repo = habit_repo or HabitRepository()

    def load_records(self, user_id: str, mode: ViewMode) -> HeatmapRecords:
        """Fetch only the collections the mode reads."""
        kind = mode.kind
        overview = kind == ViewKind.OVERVIEW
        return HeatmapRecords(
            tasks=self.task_repo.find_by_user(user_id) if overview or kind == ViewKind.TASKS else [],
            journals=self.journal_repo.find_by_user(user_id) if overview or kind == ViewKind.JOURNAL else [],
            focus=self.focus_repo.daily_totals(user_id) if overview or kind == ViewKind.FOCUS else [],
            habits=self.habit_repo.find_by_user(user_id) if overview or kind == ViewKind.HABIT else [],
        )

    def build(self, user_id: str, mode: ViewMode,
              today: Optional[Union[date, str]] = None) -> Heatmap:
        heatmap = build_heatmap(self.load_records(user_id, mode), mode, today, settings.heatmap_months)
        logger.info(f"Built {mode} heatmap for {user_id}: {heatmap.total} {heatmap.label}")
        return heatmap
