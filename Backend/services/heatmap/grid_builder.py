"""
Lay per-day counts out as twelve calendar months for the heatmap widget.
"""

import calendar
from datetime import date
from typing import Annotated, Dict, List, Literal, Optional, Sequence, Union
from pydantic import BaseModel, Field
from services.heatmap.view_mode import ViewMode, DEFAULT_THRESHOLDS
from utils.datetime_utils import add_months, format_calendar_day, parse_calendar_day

MONTHS_SHOWN = 12


class SpacerCell(BaseModel):
    type: Literal["spacer"] = "spacer"
    id: str


class DayCell(BaseModel):
    type: Literal["day"] = "day"
    id: str
    date: str
    count: int = 0
    level: int = Field(0, ge=0, le=4)


GridCell = Annotated[Union[SpacerCell, DayCell], Field(discriminator="type")]


class MonthGrid(BaseModel):
    name: str
    year: int
    month: int
    days: List[GridCell] = Field(default_factory=list)

    @property
    def spacer_count(self) -> int:
        return sum(1 for cell in self.days if cell.type == "spacer")


def intensity_level(count: int, thresholds: Sequence[int] = DEFAULT_THRESHOLDS) -> int:
    """Shade 0..4 for a count; the highest threshold reached wins."""
    t1, t2, t3, t4 = thresholds
    if count >= t4:
        return 4
    if count >= t3:
        return 3
    if count >= t2:
        return 2
    if count >= t1:
        return 1
    return 0


def leading_spacers(year: int, month: int) -> int:
    """Days of the week before the 1st, counting from Sunday."""
    # date.weekday() is Monday based
    return (date(year, month, 1).weekday() + 1) % 7


def first_month_shown(today: date, months: int = MONTHS_SHOWN) -> date:
    return add_months(today, -(months - 1))


def build_month(year: int, month: int, counts_by_date: Dict[str, int],
                thresholds: Sequence[int]) -> MonthGrid:
    days: List[GridCell] = [
        SpacerCell(id=f"spacer-{s}") for s in range(leading_spacers(year, month))
    ]
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        key = format_calendar_day(date(year, month, day))
        count = counts_by_date.get(key, 0)
        days.append(DayCell(id=key, date=key, count=count,
                            level=intensity_level(count, thresholds)))
    return MonthGrid(name=calendar.month_abbr[month], year=year, month=month, days=days)


def build_grid(counts_by_date: Dict[str, int], mode: ViewMode,
               today: Optional[Union[date, str]] = None,
               months: int = MONTHS_SHOWN) -> List[MonthGrid]:
    """
    Twelve months, oldest first, ending with the month containing today.

    The grid has the same shape no matter how sparse the counts are.
    """
    if today is None:
        today = date.today()
    elif not isinstance(today, date):
        today = parse_calendar_day(today)

    start = first_month_shown(today, months)
    grid = []
    for offset in range(months):
        first = add_months(start, offset)
        grid.append(build_month(first.year, first.month, counts_by_date or {},
                                mode.thresholds))
    return grid
