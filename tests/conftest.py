"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from coursequiz.core.errors import UnauthenticatedError
from coursequiz.core.models import (
    Activity,
    Feedback,
    Option,
    Question,
    Result,
    ResumeIntent,
    Submission,
    User,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ============================================================================
# Fake collaborators
# ============================================================================


class FakePlatform:
    """
    In-memory activity source and answer submitter.

    Set ``load_gate`` / ``submit_gate`` to an asyncio.Event to hold the
    response until the test releases it.
    """

    def __init__(self, activities=None, result=None):
        self.activities = {a.id: a for a in (activities or [])}
        self.result = result
        self.load_error = None
        self.submit_error = None
        self.load_gate = None
        self.submit_gate = None
        self.load_started = asyncio.Event()
        self.submit_started = asyncio.Event()
        self.load_calls = []
        self.submissions = []

    async def get_activity(self, activity_id):
        self.load_calls.append(activity_id)
        self.load_started.set()
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.load_error is not None:
            raise self.load_error
        return self.activities[activity_id]

    async def submit_answers(self, submission: Submission):
        self.submissions.append(submission)
        self.submit_started.set()
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        return self.result


class FakeIdentity:
    def __init__(self, user=None):
        self.user = user

    async def get_current_user(self):
        if self.user is None:
            raise UnauthenticatedError()
        return self.user


class RecordingRedirector:
    def __init__(self):
        self.intents: list[ResumeIntent] = []

    def redirect_to_login(self, intent):
        self.intents.append(intent)


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def two_question_activity():
    """Activity with two single-choice questions, two options each."""
    return Activity(
        id=7,
        name="Networking Basics",
        questions=(
            Question(
                id=1,
                prompt="Which layer handles routing?",
                options=(Option(id=1, text="Network"), Option(id=2, text="Physical")),
            ),
            Question(
                id=2,
                prompt="Which protocol resolves names?",
                options=(Option(id=3, text="ARP"), Option(id=4, text="DNS")),
            ),
        ),
        course_id=3,
    )


@pytest.fixture
def graded_result():
    """Grader response for answers {1: 1, 2: 3}."""
    return Result(
        score=50,
        error_count=1,
        completed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        feedback=(
            Feedback(question_id=1, correct=True, correct_option_id=1),
            Feedback(
                question_id=2,
                correct=False,
                correct_option_id=4,
                explanation="DNS maps names to addresses.",
            ),
        ),
    )


@pytest.fixture
def learner():
    return User(id=99, name="Ada", email="ada@example.com")


@pytest.fixture
def activity_payload():
    """Backend JSON for GET /atividades/7."""
    return {
        "id_atividade": 7,
        "nome": "Networking Basics",
        "id_curso": 3,
        "questoes": [
            {
                "id_questao": 1,
                "descricao": "Which layer handles routing?",
                "tipo": "MULTIPLA_ESCOLHA",
                "alternativas": [
                    {"id_alternativa": 1, "descricao": "Network"},
                    {"id_alternativa": 2, "descricao": "Physical"},
                ],
            },
            {
                "id_questao": 2,
                "descricao": "Which protocol resolves names?",
                "tipo": "MULTIPLA_ESCOLHA",
                "alternativas": [
                    {"id_alternativa": 3, "descricao": "ARP"},
                    {"id_alternativa": 4, "descricao": "DNS"},
                ],
            },
        ],
    }


@pytest.fixture
def result_payload():
    """Backend JSON returned by POST /progresso."""
    return {
        "pontuacao": 50,
        "erros": 1,
        "data_conclusao": "2024-05-01T12:00:00Z",
        "feedbackQuestoes": [
            {"id_questao": 1, "acertou": True, "id_alternativa_correta": 1},
            {
                "id_questao": 2,
                "acertou": False,
                "id_alternativa_correta": 4,
                "explicacao_pos_resposta": "DNS maps names to addresses.",
            },
        ],
    }


# ============================================================================
# Attempt fixtures
# ============================================================================


@pytest.fixture
def platform(two_question_activity, graded_result):
    return FakePlatform(activities=[two_question_activity], result=graded_result)


@pytest.fixture
def identity(learner):
    return FakeIdentity(learner)


@pytest.fixture
def redirector():
    return RecordingRedirector()


@pytest.fixture
def attempt(platform, identity, redirector):
    from coursequiz.assessment.attempt import ActivityAttempt

    return ActivityAttempt(
        activities=platform,
        submitter=platform,
        identity=identity,
        redirector=redirector,
    )
