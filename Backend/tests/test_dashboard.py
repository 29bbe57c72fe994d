import asyncio
from client.dashboard import HeatmapDashboard
from services.heatmap import ViewMode

TODAY = "2024-06-15"


class FakeRecordsGateway:
    def __init__(self):
        self.tasks = [{"date": TODAY, "completed": True}]
        self.gate = None
        self.entered = asyncio.Event()

    async def list_tasks(self):
        snapshot = list(self.tasks)
        if self.gate is not None:
            gate, self.gate = self.gate, None
            self.entered.set()
            await gate.wait()
        return snapshot

    async def list_journals(self):
        return [{"date": TODAY}]

    async def focus_days(self):
        return [{"date": TODAY, "total_minutes": 30, "sessions": 1}]

    async def list_habits(self):
        return [{"id": "read", "completed_dates": [TODAY]}]


def count_on(heatmap, day=TODAY):
    return next(c.count for c in heatmap.months[-1].days if c.type == "day" and c.date == day)


async def test_refresh_builds_overview():
    dashboard = HeatmapDashboard(FakeRecordsGateway(), today=lambda: TODAY)
    heatmap = await dashboard.refresh()
    # task 1 + journal 3 + 30 focus minutes 2 + habit 1
    assert count_on(heatmap) == 7
    assert heatmap.label == "Score"


async def test_mode_switch_recomputes_without_fetching():
    dashboard = HeatmapDashboard(FakeRecordsGateway(), today=lambda: TODAY)
    await dashboard.refresh()
    assert dashboard.set_mode(ViewMode.focus()).total == 30
    assert dashboard.set_mode("journal").total == 1
    assert dashboard.set_mode(ViewMode.habit("read")).total == 1


async def test_stale_refresh_is_discarded():
    gateway = FakeRecordsGateway()
    dashboard = HeatmapDashboard(gateway, today=lambda: TODAY)
    gate = asyncio.Event()
    gateway.gate = gate

    slow = asyncio.create_task(dashboard.refresh())
    await gateway.entered.wait()
    gateway.tasks = []
    fresh = await dashboard.refresh()
    assert count_on(fresh) == 6

    gate.set()
    await slow
    assert count_on(dashboard.heatmap) == 6


async def test_close_discards_in_flight_refresh():
    gateway = FakeRecordsGateway()
    dashboard = HeatmapDashboard(gateway, today=lambda: TODAY)
    gate = asyncio.Event()
    gateway.gate = gate

    pending = asyncio.create_task(dashboard.refresh())
    await gateway.entered.wait()
    dashboard.close()
    gate.set()
    await pending
    assert dashboard.heatmap is None
    assert await dashboard.refresh() is None
