"""Collaborator contracts consumed by the assessment engine."""

from __future__ import annotations

from typing import Protocol

from coursequiz.core.models import Activity, Result, ResumeIntent, Submission, User


class ActivitySource(Protocol):
    async def get_activity(self, activity_id: int) -> Activity:
        """Raise NotFoundError or NetworkError on failure."""
        ...


class AnswerSubmitter(Protocol):
    async def submit_answers(self, submission: Submission) -> Result:
        """Raise SubmissionError on failure."""
        ...


class IdentityProvider(Protocol):
    async def get_current_user(self) -> User:
        """Raise UnauthenticatedError when nobody is logged in."""
        ...


class LoginRedirector(Protocol):
    def redirect_to_login(self, intent: ResumeIntent) -> None:
        ...
