"""Interactive assessment engine."""

from .answers import AnswerCollector
from .attempt import ActivityAttempt, AttemptState
from .navigator import Navigator
from .review import OptionReview, QuestionReview, build_review

__all__ = [
    "ActivityAttempt",
    "AnswerCollector",
    "AttemptState",
    "Navigator",
    "OptionReview",
    "QuestionReview",
    "build_review",
]
