"""
Client-side session state: who is signed in, which API to talk to and
the last tasks fetched, persisted as a small JSON file between runs.
"""

import json
import os
import tempfile
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from core.config import settings
import logging

logger = logging.getLogger(__name__)


class UserSession(BaseModel):
    api_url: str = Field(default_factory=lambda: settings.client_api_url)
    token: Optional[str] = None
    username: Optional[str] = None
    theme: str = "dark"
    cached_tasks: List[Dict[str, Any]] = Field(default_factory=list)
    last_activity_date: Optional[str] = Field(
        None, description="Last calendar day a task was logged or completed")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def mark_activity(self, day: str) -> None:
        if self.last_activity_date is None or day > self.last_activity_date:
            self.last_activity_date = day


class SessionStore:
    """Loads and saves a UserSession as JSON."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.client_session_file

    def load(self) -> UserSession:
        """Read the saved session; a missing or unreadable file gives a fresh one."""
        if not os.path.exists(self.path):
            return UserSession()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return UserSession(**json.load(f))
        except (OSError, ValueError, TypeError, PydanticValidationError) as e:
            logger.warning(f"⚠️ Ignoring unreadable session file {self.path}: {e}")
            return UserSession()

    def save(self, session: UserSession) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".session-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(session.model_dump(mode="json"), f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def clear(self) -> UserSession:
        """Forget the signed-in user, keeping the API URL and theme."""
        previous = self.load()
        session = UserSession(api_url=previous.api_url, theme=previous.theme)
        self.save(session)
        logger.info(f"Session cleared for {previous.username or 'anonymous'}")
        return session
