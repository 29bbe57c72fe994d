import asyncio
import inspect
import math
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set, Union
from pydantic import BaseModel
from client.session import UserSession
from core.config import settings
from utils.datetime_utils import format_calendar_day, parse_clock_time
import logging

logger = logging.getLogger(__name__)


class Reminder(BaseModel):
    key: str
    title: str
    body: str


Notifier = Callable[[Reminder], Union[None, Awaitable[None]]]


def log_notifier(reminder: Reminder) -> None:
    logger.info(f"🔔 {reminder.title}: {reminder.body}")


EVENING_MESSAGES = {
    20: ("📝 Keep your streak alive!",
         "You haven't logged any progress today. Take 5 minutes to record your wins."),
    22: ("⚠️ Streak Risk: 2 Hours Left",
         "Don't break the chain! Log something now to maintain your productive streak."),
}


def minutes_until(now: datetime, hour: int, minute: int) -> int:
    """Whole minutes from now until hour:minute today, floored."""
    due = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return math.floor((due - now).total_seconds() / 60)


class ReminderLoop:
    """
    Periodic reminder check bound to one client session.

    Each tick looks at the cached tasks for something due in exactly
    `lead_minutes`, and on the hour at each evening hour warns when
    nothing was logged today. A reminder fires at most once per key.
    """

    def __init__(self, session: UserSession,
                 notifier: Optional[Notifier] = None,
                 interval: Optional[float] = None,
                 lead_minutes: Optional[int] = None,
                 evening_hours: Optional[Sequence[int]] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.session = session
        self.notifier = notifier or log_notifier
        self.interval = interval if interval is not None else settings.reminder_interval_seconds
        self.lead_minutes = lead_minutes if lead_minutes is not None else settings.reminder_lead_minutes
        self.evening_hours = list(evening_hours if evening_hours is not None
                                  else settings.reminder_evening_hours)
        self.clock = clock or datetime.now
        self.sent: Set[str] = set()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def due_reminders(self, now: datetime) -> List[Reminder]:
        today = format_calendar_day(now)
        reminders = []

        for task in self.session.cached_tasks:
            if task.get("date") != today or task.get("completed") or not task.get("time"):
                continue
            clock = parse_clock_time(task["time"])
            if clock is None:
                continue
            if minutes_until(now, *clock) == self.lead_minutes:
                reminders.append(Reminder(
                    key=f"{task.get('id')}-{today}",
                    title=f"⏰ Upcoming: {task.get('text', 'Task')}",
                    body=f"Starting in {self.lead_minutes} minutes! Get ready to focus.",
                ))

        if now.minute == 0 and now.hour in self.evening_hours:
            if self.session.last_activity_date != today:
                title, body = EVENING_MESSAGES.get(
                    now.hour, ("📝 Nothing logged today", "Log something to keep your streak."))
                reminders.append(Reminder(key=f"evening-{now.hour}-{today}",
                                          title=title, body=body))

        return [r for r in reminders if r.key not in self.sent]

    async def check_once(self, now: Optional[datetime] = None) -> List[Reminder]:
        """Run one tick and return the reminders that were sent."""
        delivered = []
        for reminder in self.due_reminders(now or self.clock()):
            self.sent.add(reminder.key)
            try:
                result = self.notifier(reminder)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"❌ Notifier failed for {reminder.key}: {e}")
                continue
            delivered.append(reminder)
        return delivered

    async def _run(self) -> None:
        while True:
            try:
                await self.check_once()
            except Exception as e:
                logger.error(f"❌ Reminder check failed: {str(e)}")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Reminder loop started (every {self.interval}s)")

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Reminder loop stopped")
