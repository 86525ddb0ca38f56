"""Domain models and error types shared across coursequiz."""

from .errors import (
    CourseQuizError,
    NetworkError,
    NotFoundError,
    SubmissionError,
    UnauthenticatedError,
    ValidationError,
)
from .models import (
    Activity,
    ActivitySummary,
    Answer,
    Course,
    Feedback,
    Module,
    Option,
    ProgressEntry,
    Question,
    Result,
    ResumeIntent,
    Submission,
    User,
)

__all__ = [
    "Activity",
    "ActivitySummary",
    "Answer",
    "Course",
    "CourseQuizError",
    "Feedback",
    "Module",
    "NetworkError",
    "NotFoundError",
    "Option",
    "ProgressEntry",
    "Question",
    "Result",
    "ResumeIntent",
    "Submission",
    "SubmissionError",
    "UnauthenticatedError",
    "User",
    "ValidationError",
]
