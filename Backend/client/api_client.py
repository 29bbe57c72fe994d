import asyncio
import aiohttp
from typing import Any, Dict, List, Optional
from app.schemas.focus_schemas import FocusDayResponse, FocusLogResponse
from app.schemas.habit_schemas import HabitResponse
from app.schemas.journal_schemas import BulkImportResponse, JournalResponse
from app.schemas.task_schemas import TaskResponse
from client.session import UserSession
from core.config import settings
from core.exceptions import MomentumError, NetworkError, error_from_payload
from services.heatmap import Heatmap
import logging

logger = logging.getLogger(__name__)


class MomentumAPIClient:
    """
    Async REST client for the Momentum API.

    Every failure surfaces as a MomentumError subclass: HTTP errors are
    rebuilt from the response body, transport problems become NetworkError.
    """

    def __init__(self, session: UserSession, timeout: Optional[float] = None):
        self.user_session = session
        self.timeout = timeout or settings.client_request_timeout_seconds
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    def _url(self, path: str) -> str:
        return f"{self.user_session.api_url.rstrip('/')}{settings.api_prefix}{path}"

    async def _make_request(self, method: str, path: str,
                            data: Any = None,
                            params: Optional[Dict[str, Any]] = None) -> Any:
        """Make HTTP request to the API with timeout"""
        session = await self._get_session()
        url = self._url(path)
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug(f"Making {method} request to {url}")
            async with session.request(
                method, url,
                headers=self.user_session.auth_headers(),
                json=data,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                logger.debug(f"Response status: {response.status} for {url}")
                if response.content_type == "application/json":
                    payload = await response.json()
                else:
                    payload = {"detail": await response.text()}

                if 200 <= response.status < 300:
                    return payload

                if not isinstance(payload, dict):
                    payload = {"detail": str(payload)}
                logger.warning(
                    f"Request to {url} failed with status {response.status}: {payload.get('detail')}")
                raise error_from_payload(response.status, payload)
        except MomentumError:
            raise
        except asyncio.TimeoutError:
            logger.warning(f"Request to {url} timed out after {self.timeout} seconds")
            raise NetworkError(f"Request to {url} timed out", "timeout_error",
                               {"url": url})
        except aiohttp.ClientError as e:
            logger.error(f"Error making request to {url}: {str(e)}")
            raise NetworkError(f"Error making request to {url}: {str(e)}",
                               "request_error", {"url": url})

    # Auth

    async def register(self, username: str, password: str, full_name: Optional[str] = None) -> UserSession:
        payload = await self._make_request("POST", "/auth/register", {
            "username": username, "password": password, "full_name": full_name})
        return self._signed_in(payload)

    async def login(self, username: str, password: str) -> UserSession:
        payload = await self._make_request("POST", "/auth/login", {
            "username": username, "password": password})
        return self._signed_in(payload)

    def _signed_in(self, payload: Dict[str, Any]) -> UserSession:
        self.user_session.token = payload["token"]
        self.user_session.username = payload["username"]
        logger.info(f"✅ Signed in as {self.user_session.username}")
        return self.user_session

    # Tasks

    async def list_tasks(self) -> List[TaskResponse]:
        rows = await self._make_request("GET", "/tasks")
        return [TaskResponse(**row) for row in rows]

    async def create_task(self, task: Dict[str, Any]) -> TaskResponse:
        return TaskResponse(**await self._make_request("POST", "/tasks", task))

    async def update_task(self, task_id: str, changes: Dict[str, Any]) -> TaskResponse:
        return TaskResponse(**await self._make_request("PUT", f"/tasks/{task_id}", changes))

    async def delete_task(self, task_id: str) -> None:
        await self._make_request("DELETE", f"/tasks/{task_id}")

    async def copy_task(self, task_id: str, date: Optional[str] = None) -> TaskResponse:
        body = {"date": date} if date else None
        return TaskResponse(**await self._make_request("POST", f"/tasks/{task_id}/copy", body))

    async def clear_custom_list(self, list_name: str) -> int:
        result = await self._make_request("DELETE", f"/tasks/list/{list_name}")
        return result.get("updated", 0)

    # Journals

    async def list_journals(self) -> List[JournalResponse]:
        rows = await self._make_request("GET", "/journals")
        return [JournalResponse(**row) for row in rows]

    async def save_journal(self, entry: Dict[str, Any]) -> JournalResponse:
        return JournalResponse(**await self._make_request("POST", "/journals", entry))

    async def bulk_import_journals(self, entries: List[Dict[str, Any]]) -> BulkImportResponse:
        return BulkImportResponse(**await self._make_request("POST", "/journals/bulk", entries))

    # Focus

    async def focus_days(self) -> List[FocusDayResponse]:
        rows = await self._make_request("GET", "/focus")
        return [FocusDayResponse(**row) for row in rows]

    async def log_focus(self, duration: int, date: str, mode: str = "focus") -> FocusLogResponse:
        payload = await self._make_request("POST", "/focus", {
            "duration": duration, "date": date, "mode": mode})
        return FocusLogResponse(**payload)

    # Habits

    async def list_habits(self) -> List[HabitResponse]:
        rows = await self._make_request("GET", "/habits")
        return [HabitResponse(**row) for row in rows]

    async def create_habit(self, name: str, color: Optional[str] = None) -> HabitResponse:
        return HabitResponse(**await self._make_request("POST", "/habits", {
            "name": name, "color": color}))

    async def toggle_habit(self, habit_id: str, date: str) -> HabitResponse:
        return HabitResponse(**await self._make_request(
            "PUT", f"/habits/{habit_id}/toggle", {"date": date}))

    async def delete_habit(self, habit_id: str) -> None:
        await self._make_request("DELETE", f"/habits/{habit_id}")

    # Heatmap

    async def heatmap(self, mode: str = "overview", habit_id: Optional[str] = None,
                      today: Optional[str] = None) -> Heatmap:
        payload = await self._make_request("GET", "/heatmap", params={
            "mode": mode, "habit_id": habit_id, "today": today})
        return Heatmap(**payload)

    async def close(self):
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None
