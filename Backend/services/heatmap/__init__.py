"""
Heatmap engine: per-day aggregation and the 12-month calendar grid.
"""

from services.heatmap.view_mode import ViewKind, ViewMode, MODE_POLICIES
from services.heatmap.aggregator import DateWindow, HeatmapAggregate, HeatmapRecords, aggregate
from services.heatmap.grid_builder import DayCell, MonthGrid, SpacerCell, build_grid, intensity_level
from services.heatmap.heatmap_service import Heatmap, HeatmapService, build_heatmap, heatmap_window

__all__ = [
    "ViewKind",
    "ViewMode",
    "MODE_POLICIES",
    "DateWindow",
    "HeatmapAggregate",
    "HeatmapRecords",
    "aggregate",
    "DayCell",
    "MonthGrid",
    "SpacerCell",
    "build_grid",
    "intensity_level",
    "Heatmap",
    "HeatmapService",
    "build_heatmap",
    "heatmap_window",
]
