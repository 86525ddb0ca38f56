"""Bounded cursor over an activity's questions."""

from __future__ import annotations

from coursequiz.core.models import Question


class Navigator:
    """
    Tracks which question is displayed.

    Moves never wrap around and never look at answers; users may skip
    ahead and come back later.
    """

    def __init__(self, questions: tuple[Question, ...] = ()):
        self._questions = questions
        self._index = 0

    def reset(self, questions: tuple[Question, ...]) -> None:
        self._questions = questions
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def count(self) -> int:
        return len(self._questions)

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index >= self.count - 1

    def current(self) -> Question | None:
        if not self._questions:
            return None
        return self._questions[self._index]

    def next(self) -> None:
        if self._index < self.count - 1:
            self._index += 1

    def previous(self) -> None:
        if self._index > 0:
            self._index -= 1
