"""
Error taxonomy for the course platform client.

The HTTP client raises these; the assessment engine catches them at the
boundary of each asynchronous call and turns them into error state.
"""

from __future__ import annotations


class CourseQuizError(Exception):
    """Base class for every error raised by coursequiz."""

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(CourseQuizError):
    """The requested activity does not exist (or has no questions)."""

    default_message = "Activity not found."


class NetworkError(CourseQuizError):
    """The backend could not be reached or answered with a failure."""

    default_message = "Could not load the activity. Please try again."


class UnauthenticatedError(CourseQuizError):
    """No authenticated user is available."""

    default_message = "You need to log in first."


class ValidationError(CourseQuizError):
    """Local validation failed; no request was made."""

    default_message = "Please answer all questions before submitting."


class SubmissionError(CourseQuizError):
    """The backend rejected or failed the answer submission."""

    default_message = "An error occurred while submitting your answers."
