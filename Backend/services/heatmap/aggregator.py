"""
Fold raw activity records into per-day counts for one heatmap view.

Records may be pydantic models or plain mappings (API payloads). Stored
dates are bucketed by their calendar-day prefix only, never shifted into
another timezone. A malformed record is skipped, never raised on.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from services.heatmap.view_mode import (
    ViewKind, ViewMode,
    OVERVIEW_TASK_WEIGHT, OVERVIEW_JOURNAL_WEIGHT,
    OVERVIEW_FOCUS_MINUTES_PER_POINT, OVERVIEW_HABIT_WEIGHT,
)
from utils.datetime_utils import normalize_calendar_day
import logging

logger = logging.getLogger(__name__)


class HeatmapRecords(BaseModel):
    """Everything one user has logged, as loaded from the stores."""
    tasks: List[Any] = Field(default_factory=list)
    journals: List[Any] = Field(default_factory=list)
    focus: List[Any] = Field(default_factory=list, description="FocusDay rows")
    habits: List[Any] = Field(default_factory=list)


class HeatmapAggregate(BaseModel):
    counts_by_date: Dict[str, int] = Field(default_factory=dict)
    total: int = 0
    label: str


class DateWindow(BaseModel):
    """Inclusive range of calendar days."""
    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    @field_validator("start", "end", mode="before")
    @classmethod
    def calendar_day(cls, v):
        day = normalize_calendar_day(v)
        if day is None:
            raise ValueError("window bounds must be calendar days")
        return day

    def contains(self, day: str) -> bool:
        # YYYY-MM-DD strings order the same way as the days they name
        return self.start <= day <= self.end


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def _minutes(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or value != value or value < 0:
        return None
    return int(value)


class _Counter:
    """Accumulates weights per day, honouring the optional window."""

    def __init__(self, window: Optional[DateWindow]):
        self.window = window
        self.counts: Dict[str, int] = defaultdict(int)
        self.skipped = 0

    def add(self, raw_day: Any, weight: int) -> None:
        day = normalize_calendar_day(raw_day)
        if day is None:
            self.skipped += 1
            return
        if self.window is not None and not self.window.contains(day):
            return
        self.counts[day] += weight


def _add_tasks(counter: _Counter, tasks: Iterable[Any], weight: int) -> None:
    for task in tasks:
        if _field(task, "completed") is True:
            counter.add(_field(task, "date"), weight)


def _add_journals(counter: _Counter, journals: Iterable[Any], weight: int) -> None:
    for entry in journals:
        counter.add(_field(entry, "date"), weight)


def _add_focus(counter: _Counter, focus_days: Iterable[Any], points_per: int = 0) -> None:
    for row in focus_days:
        minutes = _minutes(_field(row, "total_minutes", "totalMinutes"))
        if minutes is None:
            counter.skipped += 1
            continue
        weight = minutes // points_per if points_per else minutes
        counter.add(_field(row, "date", "_id"), weight)


def _add_habit_days(counter: _Counter, habit: Any, weight: int) -> None:
    for day in _field(habit, "completed_dates", "completedDates") or []:
        counter.add(day, weight)


def aggregate(records: Union[HeatmapRecords, Mapping[str, Any]],
              mode: ViewMode,
              window: Optional[DateWindow] = None) -> HeatmapAggregate:
    """
    Build per-day counts and a total for a view mode.

    | mode     | contributes                       | weight          |
    |----------|-----------------------------------|-----------------|
    | tasks    | completed tasks with a date       | +1              |
    | journal  | journal entries with a date       | +1              |
    | focus    | FocusDay rows                     | +total_minutes  |
    | overview | all of the above plus habit days  | 1 / 3 / min//15 / 1 |
    | habit    | completed dates of that habit     | +1              |

    The total is the sum of the per-day counts, so records outside the
    window never reach it.
    """
    if isinstance(records, Mapping):
        records = HeatmapRecords(**records)

    counter = _Counter(window)
    kind = mode.kind

    if kind == ViewKind.TASKS:
        _add_tasks(counter, records.tasks, 1)
    elif kind == ViewKind.JOURNAL:
        _add_journals(counter, records.journals, 1)
    elif kind == ViewKind.FOCUS:
        _add_focus(counter, records.focus)
    elif kind == ViewKind.HABIT:
        for habit in records.habits:
            if str(_field(habit, "id", "_id")) == mode.habit_id:
                _add_habit_days(counter, habit, 1)
                break
        else:
            logger.debug(f"Habit {mode.habit_id} not found, empty heatmap")
    else:
        _add_tasks(counter, records.tasks, OVERVIEW_TASK_WEIGHT)
        _add_journals(counter, records.journals, OVERVIEW_JOURNAL_WEIGHT)
        _add_focus(counter, records.focus, OVERVIEW_FOCUS_MINUTES_PER_POINT)
        for habit in records.habits:
            _add_habit_days(counter, habit, OVERVIEW_HABIT_WEIGHT)

    if counter.skipped:
        logger.debug(f"Skipped {counter.skipped} malformed records for {mode}")

    counts = {day: count for day, count in sorted(counter.counts.items()) if count > 0}
    return HeatmapAggregate(
        counts_by_date=counts,
        total=sum(counts.values()),
        label=mode.label,
    )
