"""
Domain models for activities, submissions and graded results.

Each model knows how to read (``from_dict``) or write (``to_dict``) the
backend's JSON representation, which uses Portuguese field names.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable

SINGLE_CHOICE = "MULTIPLA_ESCOLHA"


@dataclass(frozen=True)
class Option:
    """A selectable choice of a question."""

    id: int
    text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Option:
        return cls(id=data["id_alternativa"], text=data.get("descricao", ""))


@dataclass(frozen=True)
class Question:
    """A prompt with its ordered options."""

    id: int
    prompt: str
    type: str = SINGLE_CHOICE
    options: tuple[Option, ...] = ()

    @property
    def is_single_choice(self) -> bool:
        """Only single-choice questions accept a selection."""
        return self.type == SINGLE_CHOICE

    def has_option(self, option_id: int) -> bool:
        return any(option.id == option_id for option in self.options)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        return cls(
            id=data["id_questao"],
            prompt=data.get("descricao", ""),
            type=data.get("tipo", SINGLE_CHOICE),
            options=tuple(Option.from_dict(item) for item in data.get("alternativas") or []),
        )


@dataclass(frozen=True)
class Activity:
    """A gradable unit containing ordered questions."""

    id: int
    name: str
    questions: tuple[Question, ...] = ()
    course_id: int | None = None

    @property
    def question_ids(self) -> set[int]:
        return {question.id for question in self.questions}

    def question(self, question_id: int) -> Question | None:
        """Look up a question by id."""
        return next((q for q in self.questions if q.id == question_id), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Activity:
        """Parse an activity from the ``GET /atividades/{id}`` payload."""
        activity_id = data["id_atividade"]
        return cls(
            id=activity_id,
            name=data.get("nome") or f"Activity {activity_id}",
            questions=tuple(Question.from_dict(item) for item in data.get("questoes") or []),
            course_id=data.get("id_curso"),
        )


@dataclass(frozen=True)
class User:
    """Authenticated user as returned by the platform."""

    id: int
    name: str = ""
    email: str = ""
    is_admin: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=data["id_usuario"],
            name=data.get("nome", ""),
            email=data.get("email", ""),
            is_admin=bool(data.get("is_admin", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id_usuario": self.id,
            "nome": self.name,
            "email": self.email,
            "is_admin": self.is_admin,
        }


@dataclass(frozen=True)
class Answer:
    """One submitted answer."""

    question_id: int
    chosen_option_id: int


@dataclass(frozen=True)
class Submission:
    """Answer set submitted for grading."""

    user_id: int
    activity_id: int
    answers: tuple[Answer, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert submission to the ``POST /progresso`` payload."""
        return {
            "id_usuario": self.user_id,
            "id_atividade": self.activity_id,
            "respostas_submetidas": [
                {
                    "id_questao": answer.question_id,
                    "id_alternativa_escolhida": answer.chosen_option_id,
                    "resposta_texto": None,
                }
                for answer in self.answers
            ],
        }


@dataclass(frozen=True)
class Feedback:
    """Per-question verdict from the grader."""

    question_id: int
    correct: bool
    correct_option_id: int | None
    explanation: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Feedback:
        return cls(
            question_id=data["id_questao"],
            correct=bool(data.get("acertou", False)),
            correct_option_id=data.get("id_alternativa_correta"),
            explanation=data.get("explicacao_pos_resposta") or None,
        )


@dataclass(frozen=True)
class Result:
    """Graded outcome of one submission."""

    score: float
    error_count: int
    completed_at: datetime | None = None
    feedback: tuple[Feedback, ...] = field(default_factory=tuple)

    def feedback_for(self, question_id: int) -> Feedback | None:
        return next((f for f in self.feedback if f.question_id == question_id), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result:
        """Parse a graded result from the ``POST /progresso`` response."""
        completed_at = data.get("data_conclusao")
        return cls(
            score=data.get("pontuacao", 0),
            error_count=data.get("erros", 0),
            completed_at=_parse_timestamp(completed_at) if completed_at else None,
            feedback=tuple(Feedback.from_dict(item) for item in data.get("feedbackQuestoes") or []),
        )


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat does not accept a trailing "Z" before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class ResumeIntent:
    """Where to continue once the user has logged in."""

    activity_id: int

    @property
    def path(self) -> str:
        return f"/atividade/{self.activity_id}"


# =============================================================================
# Course catalog
# =============================================================================


@dataclass(frozen=True)
class Course:
    """A course as listed in the catalog."""

    id: int
    name: str
    description: str = ""
    difficulty: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Course:
        return cls(
            id=data["id_curso"],
            name=data.get("nome") or f"Course {data['id_curso']}",
            description=data.get("descricao") or "",
            difficulty=data.get("nivel_dificuldade"),
        )


@dataclass(frozen=True)
class ActivitySummary:
    """An activity listed inside a module, without its questions."""

    id: int
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivitySummary:
        activity_id = data["id_atividade"]
        return cls(id=activity_id, name=data.get("nome") or f"Activity {activity_id}")


@dataclass(frozen=True)
class Module:
    """A section of a course grouping activities."""

    id: int
    name: str
    activities: tuple[ActivitySummary, ...] = ()

    def with_activities(self, activities: Iterable[ActivitySummary]) -> Module:
        return replace(self, activities=tuple(activities))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Module:
        module_id = data["id_modulo"]
        return cls(
            id=module_id,
            name=data.get("nome") or f"Module {module_id}",
            activities=tuple(
                ActivitySummary.from_dict(item) for item in data.get("atividades") or []
            ),
        )


@dataclass(frozen=True)
class ProgressEntry:
    """One completed activity in a user's history."""

    activity_id: int
    score: float
    error_count: int
    completed_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressEntry:
        completed_at = data.get("data_conclusao")
        return cls(
            activity_id=data["id_atividade"],
            score=data.get("pontuacao", 0),
            error_count=data.get("erros", 0),
            completed_at=_parse_timestamp(completed_at) if completed_at else None,
        )
