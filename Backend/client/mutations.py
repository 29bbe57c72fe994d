"""
Optimistic mutations over the habit and task stores.

Local state changes at once and the store call follows. Every mutation
bumps a per-record version; a server response only replaces local state
when no newer mutation for the same record was issued in the meantime,
so late responses never clobber fresher local changes. Habit toggles are
reconciled per day: while other toggles of a habit are in flight only the
toggled day is taken from the response.
"""

import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union
from pydantic import BaseModel, ConfigDict
from app.schemas.habit_schemas import HabitResponse
from app.schemas.task_schemas import TaskResponse
from client.session import SessionStore, UserSession
from core.config import settings
from core.exceptions import FutureDateError, MomentumError, NetworkError, NotFoundError, ValidationError
from utils.datetime_utils import format_calendar_day, normalize_calendar_day, today_in
import logging

logger = logging.getLogger(__name__)


class MutationResult(BaseModel):
    """Outcome of one mutation; the caller decides whether to retry."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    value: Any = None
    error: Optional[MomentumError] = None
    rolled_back: bool = False
    cancelled: bool = False


class HabitGateway(Protocol):
    async def list_habits(self) -> List[HabitResponse]: ...

    async def create_habit(self, name: str, color: Optional[str] = None) -> HabitResponse: ...

    async def toggle_habit(self, habit_id: str, date: str) -> HabitResponse: ...

    async def delete_habit(self, habit_id: str) -> None: ...


class TaskGateway(Protocol):
    async def list_tasks(self) -> List[TaskResponse]: ...

    async def update_task(self, task_id: str, changes: Dict[str, Any]) -> TaskResponse: ...

    async def copy_task(self, task_id: str, date: Optional[str] = None) -> TaskResponse: ...


Confirm = Callable[[Any], Union[bool, Awaitable[bool]]]


def local_today() -> str:
    return format_calendar_day(today_in())


def as_domain_error(error: Exception) -> MomentumError:
    if isinstance(error, MomentumError):
        return error
    logger.exception(f"Unexpected store failure: {error}")
    return NetworkError(str(error) or error.__class__.__name__, "request_error")


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


class _OptimisticState:
    """Shared bookkeeping: records by id, per-id versions, change listeners."""

    def __init__(self, today: Optional[Callable[[], str]] = None,
                 on_change: Optional[Callable[[], Any]] = None):
        self.today = today or local_today
        self.on_change = on_change
        self._versions: Dict[str, int] = defaultdict(int)

    def _bump(self, record_id: str) -> int:
        self._versions[record_id] += 1
        return self._versions[record_id]

    def _is_latest(self, record_id: str, version: int) -> bool:
        return self._versions[record_id] == version

    async def _changed(self) -> None:
        if self.on_change is None:
            return
        try:
            await _maybe_await(self.on_change())
        except Exception as e:
            # A listener failure leaves the mutation applied
            logger.error(f"❌ Change listener failed: {e}")


class HabitMutationHandler(_OptimisticState):
    """Client-side habit state with optimistic toggle, create and delete."""

    def __init__(self, gateway: HabitGateway,
                 today: Optional[Callable[[], str]] = None,
                 on_change: Optional[Callable[[], Any]] = None):
        super().__init__(today, on_change)
        self.gateway = gateway
        self.habits: Dict[str, HabitResponse] = {}
        self._pending: Dict[str, int] = defaultdict(int)
        self._day_versions: Dict[tuple, int] = defaultdict(int)

    @property
    def habit_list(self) -> List[HabitResponse]:
        return list(self.habits.values())

    def get(self, habit_id: str) -> Optional[HabitResponse]:
        return self.habits.get(habit_id)

    async def load(self) -> List[HabitResponse]:
        habits = await self.gateway.list_habits()
        self.habits = {h.id: h for h in habits}
        logger.debug(f"Loaded {len(self.habits)} habits")
        return self.habit_list

    def _is_done(self, habit_id: str, day: str) -> bool:
        habit = self.habits.get(habit_id)
        return habit is not None and day in habit.completed_dates

    def _set_day(self, habit_id: str, day: str, done: bool) -> None:
        habit = self.habits.get(habit_id)
        if habit is None:
            return
        dates = set(habit.completed_dates)
        if done:
            dates.add(day)
        else:
            dates.discard(day)
        self.habits[habit_id] = habit.model_copy(update={"completed_dates": sorted(dates)})

    async def toggle(self, habit_id: str, date: str) -> MutationResult:
        """
        Flip one day of a habit.

        Raises:
            ValidationError: date is not a calendar day
            FutureDateError: date is after today
            NotFoundError: habit is not loaded
        """
        day = normalize_calendar_day(date)
        if day is None:
            raise ValidationError("date must be a calendar day in YYYY-MM-DD format",
                                  details={"date": date})
        today = self.today()
        if day > today:
            raise FutureDateError(f"Cannot mark {day} before it happens",
                                  details={"date": day, "today": today})
        if habit_id not in self.habits:
            raise NotFoundError("Habit not found", details={"id": habit_id})

        key = (habit_id, day)
        was_done = self._is_done(habit_id, day)
        self._set_day(habit_id, day, not was_done)
        version = self._bump(habit_id)
        self._day_versions[key] += 1
        day_version = self._day_versions[key]
        self._pending[habit_id] += 1
        await self._changed()

        try:
            server_habit = await self.gateway.toggle_habit(habit_id, day)
        except Exception as e:
            error = as_domain_error(e)
            self._pending[habit_id] -= 1
            # A newer toggle of the same day owns its membership now
            if self._day_versions[key] == day_version:
                self._set_day(habit_id, day, was_done)
            logger.warning(f"⚠️ Toggle of habit {habit_id} on {day} rolled back: {error}")
            await self._changed()
            return MutationResult(ok=False, error=error, rolled_back=True)

        self._pending[habit_id] -= 1
        if habit_id in self.habits:
            if self._pending[habit_id] == 0 and self._is_latest(habit_id, version):
                self.habits[habit_id] = server_habit
            elif self._day_versions[key] == day_version:
                self._set_day(habit_id, day, day in server_habit.completed_dates)
            await self._changed()
        return MutationResult(ok=True, value=self.habits.get(habit_id, server_habit))

    async def toggle_today(self, habit_id: str) -> MutationResult:
        return await self.toggle(habit_id, self.today())

    async def create_habit(self, name: str, color: Optional[str] = None) -> MutationResult:
        if name is None or not name.strip():
            raise ValidationError("Habit name is required", details={"field": "name"})

        try:
            habit = await self.gateway.create_habit(
                name.strip(), color or settings.default_habit_color)
        except Exception as e:
            return MutationResult(ok=False, error=as_domain_error(e))

        self.habits[habit.id] = habit
        self._bump(habit.id)
        await self._changed()
        return MutationResult(ok=True, value=habit)

    async def delete_habit(self, habit_id: str, confirm: Confirm) -> MutationResult:
        """
        Delete a habit after the user confirms.

        `confirm` receives the habit and returns (or resolves to) a bool.
        A declined confirmation leaves everything untouched.
        """
        habit = self.habits.get(habit_id)
        if habit is None:
            raise NotFoundError("Habit not found", details={"id": habit_id})

        if not await _maybe_await(confirm(habit)):
            logger.debug(f"Deletion of habit {habit_id} cancelled")
            return MutationResult(ok=False, cancelled=True)

        order = list(self.habits)
        position = order.index(habit_id)
        del self.habits[habit_id]
        self._bump(habit_id)
        await self._changed()

        try:
            await self.gateway.delete_habit(habit_id)
        except Exception as e:
            error = as_domain_error(e)
            items = list(self.habits.items())
            items.insert(min(position, len(items)), (habit_id, habit))
            self.habits = dict(items)
            logger.warning(f"⚠️ Delete of habit {habit_id} rolled back: {error}")
            await self._changed()
            return MutationResult(ok=False, error=error, rolled_back=True)

        logger.info(f"Deleted habit {habit_id} '{habit.name}'")
        return MutationResult(ok=True, value=habit)


class TaskMutationHandler(_OptimisticState):
    """Optimistic task completion plus persisted copy-to-today."""

    def __init__(self, gateway: TaskGateway,
                 session: Optional[UserSession] = None,
                 store: Optional[SessionStore] = None,
                 today: Optional[Callable[[], str]] = None,
                 on_change: Optional[Callable[[], Any]] = None):
        super().__init__(today, on_change)
        self.gateway = gateway
        self.session = session
        self.store = store
        self.tasks: Dict[str, TaskResponse] = {}

    @property
    def task_list(self) -> List[TaskResponse]:
        return list(self.tasks.values())

    async def load(self) -> List[TaskResponse]:
        tasks = await self.gateway.list_tasks()
        self.tasks = {t.id: t for t in tasks}
        self._cache_tasks()
        return self.task_list

    def _cache_tasks(self) -> None:
        """Mirror tasks into the session so the reminder loop can read them offline."""
        if self.session is None:
            return
        self.session.cached_tasks = [t.model_dump(mode="json") for t in self.tasks.values()]
        self._persist()

    def _persist(self) -> None:
        if self.store is not None and self.session is not None:
            try:
                self.store.save(self.session)
            except OSError as e:
                logger.error(f"❌ Could not save session: {e}")

    def _record_activity(self) -> None:
        if self.session is not None:
            self.session.mark_activity(self.today())

    async def toggle_task(self, task_id: str) -> MutationResult:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found", details={"id": task_id})

        completed = not task.completed
        self.tasks[task_id] = task.model_copy(update={"completed": completed})
        version = self._bump(task_id)
        await self._changed()

        try:
            server_task = await self.gateway.update_task(task_id, {"completed": completed})
        except Exception as e:
            error = as_domain_error(e)
            current = self.tasks.get(task_id)
            if current is not None:
                self.tasks[task_id] = current.model_copy(update={"completed": not current.completed})
            logger.warning(f"⚠️ Toggle of task {task_id} rolled back: {error}")
            await self._changed()
            return MutationResult(ok=False, error=error, rolled_back=True)

        if task_id in self.tasks and self._is_latest(task_id, version):
            self.tasks[task_id] = server_task
        if completed:
            self._record_activity()
        self._cache_tasks()
        await self._changed()
        return MutationResult(ok=True, value=self.tasks.get(task_id, server_task))

    async def copy_to_today(self, task_id: str) -> MutationResult:
        """Persist a fresh, not-completed copy of a task dated today."""
        if task_id not in self.tasks:
            raise NotFoundError("Task not found", details={"id": task_id})

        try:
            copy = await self.gateway.copy_task(task_id, self.today())
        except Exception as e:
            return MutationResult(ok=False, error=as_domain_error(e))

        self.tasks[copy.id] = copy
        self._bump(copy.id)
        self._cache_tasks()
        await self._changed()
        return MutationResult(ok=True, value=copy)
