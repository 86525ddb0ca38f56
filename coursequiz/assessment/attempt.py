"""
Activity Attempt

State machine for taking one activity: load it, move between its
questions, collect answers, submit them once and show the graded review.

    NOT_LOADED -> LOADING -> READY -> SUBMITTING -> GRADED
                     \\-> LOAD_ERROR      \\-> READY (submit failed)

Usage:
    attempt = ActivityAttempt(client, client, identity, redirector)
    await attempt.load(42)
    attempt.select(question_id, option_id)
    result = await attempt.submit()

All collaborator failures are caught here and kept as ``error`` /
``error_message``; ``load`` and ``submit`` never raise them.

Every await is followed by a generation check. ``load`` and ``dispose``
bump the generation, so a response that arrives for a superseded load or
a disposed attempt is dropped without touching any state.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Mapping

from loguru import logger

from coursequiz.assessment.answers import AnswerCollector
from coursequiz.assessment.navigator import Navigator
from coursequiz.assessment.protocols import (
    ActivitySource,
    AnswerSubmitter,
    IdentityProvider,
    LoginRedirector,
)
from coursequiz.assessment.review import QuestionReview, build_review
from coursequiz.config import AttemptConfig
from coursequiz.core.errors import (
    CourseQuizError,
    NetworkError,
    NotFoundError,
    SubmissionError,
    UnauthenticatedError,
    ValidationError,
)
from coursequiz.core.models import Activity, Question, Result, ResumeIntent, Submission, User


class AttemptState(str, Enum):
    """Lifecycle of one attempt."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    GRADED = "graded"
    LOAD_ERROR = "load_error"


class ActivityAttempt:
    """Owns the activity, answers, cursor and result of one attempt."""

    def __init__(
        self,
        activities: ActivitySource,
        submitter: AnswerSubmitter,
        identity: IdentityProvider,
        redirector: LoginRedirector | None = None,
        config: AttemptConfig | None = None,
    ):
        self.activities = activities
        self.submitter = submitter
        self.identity = identity
        self.redirector = redirector
        self.config = config or AttemptConfig()

        self._navigator = Navigator()
        self._answers = AnswerCollector()
        self._state = AttemptState.NOT_LOADED
        self._activity_id: int | None = None
        self._activity: Activity | None = None
        self._user: User | None = None
        self._result: Result | None = None
        self._error: CourseQuizError | None = None
        self._resume_target: ResumeIntent | None = None
        self._generation = 0
        self._disposed = False

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def state(self) -> AttemptState:
        return self._state

    @property
    def activity(self) -> Activity | None:
        return self._activity

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def result(self) -> Result | None:
        return self._result

    @property
    def error(self) -> CourseQuizError | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        return self._error.message if self._error else None

    @property
    def resume_target(self) -> ResumeIntent | None:
        return self._resume_target

    @property
    def cursor(self) -> int:
        return self._navigator.index

    @property
    def navigator(self) -> Navigator:
        return self._navigator

    @property
    def answers(self) -> Mapping[int, int]:
        return self._answers.answers

    @property
    def submitting(self) -> bool:
        """True while a submission is in flight."""
        return self._state is AttemptState.SUBMITTING

    @property
    def read_only(self) -> bool:
        return self._result is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    # =========================================================================
    # Loader
    # =========================================================================

    async def load(self, activity_id: int) -> Activity | None:
        """
        Load an activity and start a fresh attempt.

        Previous answers, cursor and result are discarded before the
        request goes out. Returns the activity, or None when loading
        failed, was redirected to login, or was superseded.
        """
        if self._disposed:
            logger.debug("Ignoring load of activity {} on a disposed attempt", activity_id)
            return None

        self._generation += 1
        generation = self._generation
        self._activity_id = activity_id
        self._activity = None
        self._result = None
        self._error = None
        self._resume_target = None
        self._navigator.reset(())
        self._answers.reset()
        self._set_state(AttemptState.LOADING)

        try:
            user = await self.identity.get_current_user()
        except UnauthenticatedError:
            if self._is_current(generation):
                self._redirect_to_login(activity_id)
            return None
        except CourseQuizError as e:
            if self._is_current(generation):
                self._fail_load(e)
            return None
        except Exception as e:
            if self._is_current(generation):
                logger.error("Unexpected error loading activity {}: {!r}", activity_id, e)
                self._fail_load(NetworkError())
            return None

        if not self._is_current(generation):
            return None
        self._user = user

        try:
            activity = await asyncio.wait_for(
                self.activities.get_activity(activity_id),
                timeout=self.config.load_timeout_seconds,
            )
            if not activity.questions:
                raise NotFoundError(
                    f"Activity {activity_id} has no questions or was not found."
                )
        except asyncio.TimeoutError:
            if self._is_current(generation):
                logger.warning("Loading activity {} timed out", activity_id)
                self._fail_load(NetworkError("Loading the activity timed out. Please try again."))
            return None
        except UnauthenticatedError:
            if self._is_current(generation):
                self._redirect_to_login(activity_id)
            return None
        except CourseQuizError as e:
            if self._is_current(generation):
                self._fail_load(e)
            return None
        except Exception as e:
            if self._is_current(generation):
                logger.error("Unexpected error loading activity {}: {!r}", activity_id, e)
                self._fail_load(NetworkError())
            return None

        if not self._is_current(generation):
            return None

        self._activity = activity
        self._navigator.reset(activity.questions)
        self._answers.reset(activity)
        self._set_state(AttemptState.READY)
        return activity

    def _fail_load(self, error: CourseQuizError) -> None:
        logger.error("Failed to load activity {}: {}", self._activity_id, error.message)
        self._error = error
        self._set_state(AttemptState.LOAD_ERROR)

    def _redirect_to_login(self, activity_id: int) -> None:
        intent = ResumeIntent(activity_id=activity_id)
        self._resume_target = intent
        self._set_state(AttemptState.NOT_LOADED)
        logger.info("Not logged in, redirecting to login (resume at {})", intent.path)
        if self.redirector is not None:
            self.redirector.redirect_to_login(intent)

    # =========================================================================
    # Navigator
    # =========================================================================

    def current(self) -> Question | None:
        return self._navigator.current()

    def next(self) -> None:
        self._navigator.next()

    def previous(self) -> None:
        self._navigator.previous()

    # =========================================================================
    # Answer Collector
    # =========================================================================

    def select(self, question_id: int, option_id: int) -> None:
        """Record an answer. Ignored unless the attempt is editable."""
        if self._result is not None or self._state is not AttemptState.READY:
            return
        self._answers.select(question_id, option_id)
        if isinstance(self._error, ValidationError) and self._answers.is_complete():
            self._error = None

    def answer_for(self, question_id: int) -> int | None:
        return self._answers.answer_for(question_id)

    def is_complete(self) -> bool:
        return self._answers.is_complete()

    # =========================================================================
    # Submitter / Grader-view
    # =========================================================================

    async def submit(self) -> Result | None:
        """
        Submit the answers for grading.

        Returns the result on success. On failure returns None and keeps the
        error; the answers and cursor are left untouched so the user can
        try again. Calls made while a submission is in flight are ignored.
        """
        if self._disposed:
            return None
        if self._state is AttemptState.SUBMITTING:
            logger.debug("Submission already in flight, ignoring")
            return None
        if self._state in (AttemptState.NOT_LOADED, AttemptState.LOADING):
            # nothing answered yet; LOAD_ERROR keeps its blocking error instead
            self._error = ValidationError()
            return None
        if self._state is not AttemptState.READY or self._activity is None:
            return None

        if not self._answers.is_complete():
            self._error = ValidationError()
            return None

        submission = Submission(
            user_id=self._user.id,
            activity_id=self._activity.id,
            answers=self._answers.to_answers(),
        )
        generation = self._generation
        self._error = None
        self._set_state(AttemptState.SUBMITTING)

        error: CourseQuizError | None = None
        try:
            result = await asyncio.wait_for(
                self.submitter.submit_answers(submission),
                timeout=self.config.submit_timeout_seconds,
            )
        except asyncio.TimeoutError:
            error = SubmissionError("The submission timed out. Please try again.")
        except SubmissionError as e:
            error = e
        except CourseQuizError as e:
            error = SubmissionError(e.message)
        except Exception as e:
            logger.error("Unexpected error submitting activity {}: {!r}", submission.activity_id, e)
            error = SubmissionError()

        if not self._is_current(generation):
            logger.debug("Dropping submission response for a stale attempt")
            return None

        if error is not None:
            logger.warning("Submission failed: {}", error.message)
            self._error = error
            self._set_state(AttemptState.READY)
            return None

        self._result = result
        self._answers.freeze()
        self._set_state(AttemptState.GRADED)
        return result

    def review(self) -> list[QuestionReview]:
        """Per-question, per-option feedback. Empty until graded."""
        if self._result is None or self._activity is None:
            return []
        return build_review(self._activity, self._answers.answers, self._result)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def dispose(self) -> None:
        """Detach the attempt; pending responses will be discarded."""
        self._disposed = True
        self._generation += 1

    def _is_current(self, generation: int) -> bool:
        return not self._disposed and generation == self._generation

    def _set_state(self, state: AttemptState) -> None:
        logger.debug("Attempt {}: {} -> {}", self._activity_id, self._state.value, state.value)
        self._state = state
