"""
Login session storage and the identity provider built on it.

The session lives in ``~/.coursequiz/session.json`` and holds the bearer
token, the cached user and a pending "resume after login" intent.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from coursequiz.core.errors import CourseQuizError, UnauthenticatedError
from coursequiz.core.models import ResumeIntent, User
from coursequiz.integrations.platform_client import PlatformClient


@dataclass
class SessionData:
    """Persisted login state."""

    token: str | None = None
    user: User | None = None
    resume: ResumeIntent | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "user": self.user.to_dict() if self.user else None,
            "resume": {"activity_id": self.resume.activity_id} if self.resume else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionData:
        user = data.get("user")
        resume = data.get("resume")
        return cls(
            token=data.get("token"),
            user=User.from_dict(user) if user else None,
            resume=ResumeIntent(activity_id=resume["activity_id"]) if resume else None,
        )


class SessionStore:
    """JSON file backed session storage."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> SessionData:
        if not self.path.exists():
            return SessionData()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file {}: {}", self.path, e)
            return SessionData()
        return SessionData.from_dict(data)

    def save(self, session: SessionData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.to_dict(), indent=2), encoding="utf-8")

    def clear(self) -> None:
        """Forget token and user but keep any pending resume intent."""
        session = self.load()
        self.save(SessionData(resume=session.resume))

    def remember_resume(self, intent: ResumeIntent) -> None:
        session = self.load()
        session.resume = intent
        self.save(session)

    def pop_resume(self) -> ResumeIntent | None:
        session = self.load()
        intent = session.resume
        if intent is not None:
            session.resume = None
            self.save(session)
        return intent


class PlatformIdentity:
    """
    Identity provider backed by the session store and the platform.

    A cached user is trusted; otherwise the user is fetched with the stored
    token. A failed fetch means the token is stale, so the session is
    cleared and the caller is treated as logged out.
    """

    def __init__(self, store: SessionStore, client: PlatformClient):
        self.store = store
        self.client = client

    async def get_current_user(self) -> User:
        session = self.store.load()
        if not session.token:
            raise UnauthenticatedError()
        if session.user is not None:
            return session.user

        self.client.set_token(session.token)
        try:
            user = await self.client.get_current_user()
        except CourseQuizError as e:
            logger.warning("Stored token rejected, clearing session: {}", e)
            self.logout()
            raise UnauthenticatedError() from e

        session.user = user
        self.store.save(session)
        return user

    async def login(self, email: str, password: str) -> User:
        token, user = await self.client.login(email, password)
        session = self.store.load()
        session.token = token
        session.user = user
        self.store.save(session)
        return user

    def logout(self) -> None:
        self.store.clear()
        self.client.set_token(None)
