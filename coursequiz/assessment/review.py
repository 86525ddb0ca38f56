"""
Graded review of an attempt.

Joins the activity's questions and options, the user's answers and the
grader's per-question feedback by id. Everything the results view needs
is computed here so rendering never has to look anything up itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from coursequiz.core.models import Activity, Feedback, Option, Question, Result


@dataclass(frozen=True)
class OptionReview:
    """How one option relates to the user's answer and the correct answer."""

    option: Option
    chosen: bool  # the user picked this option
    correct: bool  # this is the correct option
    matched: bool  # the user's pick for this question was the correct one
    verdict: bool | None = None  # the grader's verdict for this question, None when missing

    @property
    def graded(self) -> bool:
        return self.verdict is not None

    @property
    def label(self) -> str:
        """Suffix shown next to the option text in the results view."""
        if self.chosen and not self.graded:
            return "your answer"
        if self.chosen:
            return "your answer - correct" if self.verdict else "your answer - incorrect"
        if self.correct:
            return "correct"
        return ""


@dataclass(frozen=True)
class QuestionReview:
    """A question together with its verdict."""

    number: int
    question: Question
    chosen_option_id: int | None
    feedback: Feedback | None
    options: tuple[OptionReview, ...]

    @property
    def correct(self) -> bool | None:
        """None when the grader returned no verdict for this question."""
        return self.feedback.correct if self.feedback else None

    @property
    def explanation(self) -> str | None:
        return self.feedback.explanation if self.feedback else None


def build_review(
    activity: Activity,
    answers: Mapping[int, int],
    result: Result,
) -> list[QuestionReview]:
    """
    Merge an activity, its answers and a graded result.

    Args:
        activity: The loaded activity
        answers: Question id -> chosen option id
        result: The grader's response

    Returns:
        One QuestionReview per question, in activity order
    """
    reviews = []
    for number, question in enumerate(activity.questions, start=1):
        chosen = answers.get(question.id)
        feedback = result.feedback_for(question.id)
        correct_id = feedback.correct_option_id if feedback else None
        matched = chosen is not None and chosen == correct_id

        options = tuple(
            OptionReview(
                option=option,
                chosen=option.id == chosen,
                correct=correct_id is not None and option.id == correct_id,
                matched=matched,
                verdict=feedback.correct if feedback else None,
            )
            for option in question.options
        )
        reviews.append(
            QuestionReview(
                number=number,
                question=question,
                chosen_option_id=chosen,
                feedback=feedback,
                options=options,
            )
        )
    return reviews
