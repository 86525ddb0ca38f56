"""
Course Platform Client

HTTP client for the course platform REST backend. Fetches activities,
submits answer sets for grading, browses the course catalog and handles
the login endpoints.

Usage:
    async with PlatformClient(config.api, token=token) as client:
        activity = await client.get_activity(42)
        result = await client.submit_answers(submission)

Failures are raised as ``coursequiz.core.errors`` exceptions. Nothing is
retried automatically.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, TypeVar

import httpx
from loguru import logger

from coursequiz.config import ApiConfig
from coursequiz.core.errors import (
    CourseQuizError,
    NetworkError,
    NotFoundError,
    SubmissionError,
    UnauthenticatedError,
)
from coursequiz.core.models import (
    Activity,
    ActivitySummary,
    Course,
    Module,
    ProgressEntry,
    Result,
    Submission,
    User,
)

T = TypeVar("T")

# Raised by the model parsers when a 2xx body does not have the expected shape
PAYLOAD_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


class PlatformClient:
    """
    HTTP client for the course platform API.

    Implements the activity source, answer submitter and current-user
    lookups used by the assessment engine.
    """

    def __init__(self, config: ApiConfig, token: str | None = None):
        self.config = config
        self._token = token
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "PlatformClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    @property
    def token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        """Swap the bearer token used for subsequent requests."""
        self._token = token
        if self._client is not None:
            if token:
                self._client.headers["Authorization"] = f"Bearer {token}"
            else:
                self._client.headers.pop("Authorization", None)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"

            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.config.http_timeout_seconds),
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str, what: str) -> httpx.Response:
        """
        GET a resource and map failure statuses to the error taxonomy.

        Args:
            url: Path relative to the base url
            what: Human readable name used in log lines and messages
        """
        try:
            client = await self._ensure_client()
            response = await client.get(url)
        except httpx.RequestError as e:
            logger.error("Connection error fetching {}: {}", what, e)
            raise NetworkError() from e

        if response.status_code == 404:
            raise NotFoundError(f"{what} was not found.")
        if response.status_code in (401, 403):
            raise UnauthenticatedError()
        if response.status_code != 200:
            logger.warning("Failed to fetch {}: {}", what, response.status_code)
            raise NetworkError()
        return response

    # =========================================================================
    # Activities
    # =========================================================================

    async def get_activity(self, activity_id: int) -> Activity:
        """
        Fetch an activity with its questions and options.

        Raises:
            NotFoundError: The activity id is unknown
            UnauthenticatedError: The token was rejected
            NetworkError: Any other transport or server failure
        """
        response = await self._get(
            f"{self.config.activities_endpoint}/{activity_id}", f"Activity {activity_id}"
        )
        try:
            activity = Activity.from_dict(_json_object(response))
        except PAYLOAD_ERRORS as e:
            logger.error("Malformed activity payload for {}: {}", activity_id, e)
            raise NetworkError() from e

        logger.debug(
            "Fetched activity {} with {} questions", activity.id, len(activity.questions)
        )
        return activity

    # =========================================================================
    # Submissions
    # =========================================================================

    async def submit_answers(self, submission: Submission) -> Result:
        """
        Submit an answer set and return the graded result.

        Raises:
            SubmissionError: On any failure, carrying the backend message if any
        """
        try:
            client = await self._ensure_client()
            response = await client.post(
                self.config.submissions_endpoint,
                json=submission.to_dict(),
            )
        except httpx.RequestError as e:
            logger.error("Connection error submitting activity {}: {}", submission.activity_id, e)
            raise SubmissionError() from e

        if response.status_code not in (200, 201):
            message = _error_message(response)
            logger.warning(
                "Submission for activity {} rejected ({}): {}",
                submission.activity_id,
                response.status_code,
                message,
            )
            raise SubmissionError(message)

        try:
            result = Result.from_dict(_json_object(response))
        except PAYLOAD_ERRORS as e:
            logger.error("Malformed result payload: {}", e)
            raise SubmissionError() from e

        logger.info(
            "Activity {} graded: score={} errors={}",
            submission.activity_id,
            result.score,
            result.error_count,
        )
        return result

    # =========================================================================
    # Course Catalog
    # =========================================================================

    async def list_courses(self) -> list[Course]:
        """Fetch every published course."""
        response = await self._get(self.config.courses_endpoint, "Course list")
        return _parse_list(response, Course.from_dict, "course list")

    async def get_course(self, course_id: int) -> Course:
        """Fetch one course without its modules."""
        response = await self._get(
            f"{self.config.courses_endpoint}/{course_id}", f"Course {course_id}"
        )
        try:
            return Course.from_dict(_json_object(response))
        except PAYLOAD_ERRORS as e:
            logger.error("Malformed course payload for {}: {}", course_id, e)
            raise NetworkError() from e

    async def list_modules(self, course_id: int) -> list[Module]:
        """Fetch a course's modules, without their activities."""
        response = await self._get(
            f"{self.config.courses_endpoint}/{course_id}/modulos",
            f"Modules of course {course_id}",
        )
        return _parse_list(response, Module.from_dict, f"modules of course {course_id}")

    async def list_module_activities(self, module_id: int) -> list[ActivitySummary]:
        """Fetch the activities of one module."""
        response = await self._get(
            f"{self.config.modules_endpoint}/{module_id}/atividades",
            f"Activities of module {module_id}",
        )
        return _parse_list(
            response, ActivitySummary.from_dict, f"activities of module {module_id}"
        )

    async def get_course_outline(self, course_id: int) -> tuple[Course, list[Module]]:
        """
        Fetch a course with its modules and each module's activities.

        A module whose activities cannot be fetched is kept with an empty
        activity list. Failures fetching the course or its modules raise.
        """
        course = await self.get_course(course_id)
        modules = await self.list_modules(course_id)

        async def with_activities(module: Module) -> Module:
            try:
                activities = await self.list_module_activities(module.id)
            except CourseQuizError as e:
                logger.warning("Could not fetch activities of module {}: {}", module.id, e)
                activities = []
            return module.with_activities(activities)

        outline = await asyncio.gather(*(with_activities(m) for m in modules))
        return course, list(outline)

    async def get_progress(self, user_id: int) -> list[ProgressEntry]:
        """Fetch a user's completed activities."""
        response = await self._get(
            f"{self.config.users_endpoint}/{user_id}/progresso",
            f"Progress of user {user_id}",
        )
        return _parse_list(response, ProgressEntry.from_dict, f"progress of user {user_id}")

    # =========================================================================
    # Users & Authentication
    # =========================================================================

    async def get_current_user(self) -> User:
        """Fetch the user the current token belongs to."""
        if not self._token:
            raise UnauthenticatedError()
        try:
            client = await self._ensure_client()
            response = await client.get(self.config.current_user_endpoint)
        except httpx.RequestError as e:
            logger.error("Connection error fetching current user: {}", e)
            raise NetworkError("Could not reach the platform.") from e

        if response.status_code in (401, 403):
            raise UnauthenticatedError()
        if response.status_code != 200:
            raise NetworkError(_error_message(response) or "Could not fetch the current user.")

        try:
            return User.from_dict(_json_object(response))
        except PAYLOAD_ERRORS as e:
            logger.error("Malformed user payload: {}", e)
            raise NetworkError("Could not fetch the current user.") from e

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Authenticate with email and password.

        Returns:
            The session token and the logged in user. The token is also
            applied to this client.
        """
        data = await self._post_auth(
            self.config.login_endpoint,
            {"email": email, "senha": password},
            fallback="Login failed.",
        )
        token = data.get("token")
        if not token or "user" not in data:
            raise UnauthenticatedError("Login failed.")
        try:
            user = User.from_dict(data["user"])
        except PAYLOAD_ERRORS as e:
            logger.error("Malformed login payload: {}", e)
            raise UnauthenticatedError("Login failed.") from e
        self.set_token(token)
        logger.info("Authenticated as user {}", user.id)
        return token, user

    async def register(self, name: str, email: str, password: str) -> str:
        """Register a new account and return the backend's message."""
        data = await self._post_auth(
            self.config.register_endpoint,
            {"nome": name, "email": email, "senha": password},
            fallback="Registration failed.",
        )
        return data.get("message", "Registration complete.")

    async def _post_auth(
        self, endpoint: str, payload: dict[str, Any], fallback: str
    ) -> dict[str, Any]:
        try:
            client = await self._ensure_client()
            response = await client.post(endpoint, json=payload)
        except httpx.RequestError as e:
            logger.error("Connection error during auth: {}", e)
            raise NetworkError("Could not reach the platform.") from e

        if response.status_code not in (200, 201):
            message = _error_message(response) or fallback
            logger.error("Auth request to {} failed: {}", endpoint, message)
            if response.status_code in (400, 401, 403):
                raise UnauthenticatedError(message)
            raise CourseQuizError(message)

        try:
            return _json_object(response)
        except ValueError as e:
            logger.error("Malformed auth response from {}: {}", endpoint, e)
            raise CourseQuizError(fallback) from e


def _json_object(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body. Anything else raises ValueError."""
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _parse_list(
    response: httpx.Response, parse: Callable[[dict[str, Any]], T], what: str
) -> list[T]:
    try:
        data = response.json()
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return [parse(item) for item in data]
    except PAYLOAD_ERRORS as e:
        logger.error("Malformed {} payload: {}", what, e)
        raise NetworkError() from e


def _error_message(response: httpx.Response) -> str | None:
    """Extract the backend's ``message`` field, if the body is JSON."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("message") or data.get("detail")
    return None
