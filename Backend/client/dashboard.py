import asyncio
from typing import Callable, Optional
from services.heatmap import Heatmap, HeatmapRecords, ViewMode, build_heatmap
from client.mutations import local_today
import logging

logger = logging.getLogger(__name__)


class HeatmapDashboard:
    """
    Keeps a heatmap in sync with the stores.

    `refresh()` fetches every record type concurrently and rebuilds the
    grid locally. Refreshes are numbered; a refresh that finishes after a
    newer one started, or after `close()`, leaves state untouched.
    """

    def __init__(self, gateway, mode: Optional[ViewMode] = None,
                 today: Optional[Callable[[], str]] = None):
        self.gateway = gateway
        self.mode = mode or ViewMode.overview()
        self.today = today or local_today
        self.records = HeatmapRecords()
        self.heatmap: Optional[Heatmap] = None
        self.closed = False
        self._generation = 0

    async def refresh(self) -> Optional[Heatmap]:
        if self.closed:
            return None
        self._generation += 1
        generation = self._generation

        tasks, journals, focus, habits = await asyncio.gather(
            self.gateway.list_tasks(),
            self.gateway.list_journals(),
            self.gateway.focus_days(),
            self.gateway.list_habits(),
        )

        if self.closed or generation != self._generation:
            logger.debug(f"Discarding stale heatmap refresh {generation}")
            return self.heatmap

        self.records = HeatmapRecords(tasks=tasks, journals=journals,
                                      focus=focus, habits=habits)
        return self.recompute()

    def recompute(self) -> Heatmap:
        """Rebuild from the records already loaded."""
        self.heatmap = build_heatmap(self.records, self.mode, self.today())
        return self.heatmap

    def set_mode(self, mode: ViewMode) -> Heatmap:
        self.mode = ViewMode.parse(mode)
        return self.recompute()

    def replace_habits(self, habits) -> Heatmap:
        """Fold fresh habit state (e.g. after an optimistic toggle) into the grid."""
        self.records = self.records.model_copy(update={"habits": list(habits)})
        return self.recompute()

    def close(self) -> None:
        self.closed = True
        self._generation += 1
