"""Per-question answer store for one attempt."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from loguru import logger

from coursequiz.core.models import Activity, Answer


class AnswerCollector:
    """
    Maps question id -> chosen option id.

    One live answer per question; a repeated selection overwrites the
    previous one. Once frozen (graded) every selection is ignored.
    """

    def __init__(self) -> None:
        self._activity: Activity | None = None
        self._answers: dict[int, int] = {}
        self._frozen = False

    def reset(self, activity: Activity | None = None) -> None:
        self._activity = activity
        self._answers = {}
        self._frozen = False

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def answers(self) -> Mapping[int, int]:
        """Read-only view of the current answers."""
        return MappingProxyType(self._answers)

    def select(self, question_id: int, option_id: int) -> None:
        if self._frozen or self._activity is None:
            return

        question = self._activity.question(question_id)
        if question is None:
            logger.warning("Ignoring answer for unknown question {}", question_id)
            return
        if not question.is_single_choice:
            logger.warning(
                "Ignoring answer for question {} of type {}", question_id, question.type
            )
            return
        if not question.has_option(option_id):
            logger.warning(
                "Ignoring option {} which does not belong to question {}",
                option_id,
                question_id,
            )
            return

        self._answers[question_id] = option_id

    def answer_for(self, question_id: int) -> int | None:
        return self._answers.get(question_id)

    def is_complete(self) -> bool:
        if self._activity is None:
            return False
        return set(self._answers) == self._activity.question_ids

    def to_answers(self) -> tuple[Answer, ...]:
        """Answers in the activity's question order."""
        if self._activity is None:
            return ()
        return tuple(
            Answer(question_id=question.id, chosen_option_id=self._answers[question.id])
            for question in self._activity.questions
            if question.id in self._answers
        )
