import random

import pytest

from interviewdesk.config.settings import Settings
from interviewdesk.core.evaluator import Evaluator
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.core.question_bank import QuestionBank
from interviewdesk.core.session_machine import SessionStateMachine
from interviewdesk.core.session_store import InMemorySessionStore
from interviewdesk.models.evaluation import EvaluationOutcome
from interviewdesk.models.interview import InterviewSession
from interviewdesk.models.question import Difficulty, Question


class StubEvaluator(Evaluator):
    """Returns queued scores; fails the first ``failures`` calls."""

    def __init__(self, scores=None, failures: int = 0):
        super().__init__(timeout_seconds=5)
        self.scores = list(scores or [])
        self.failures = failures
        self.calls = []

    async def score_answer(self, question_text, answer_text, elapsed_seconds):
        self.calls.append((question_text, answer_text, elapsed_seconds))
        if self.failures:
            self.failures -= 1
            return EvaluationOutcome.failure("model unavailable")
        score = self.scores.pop(0) if self.scores else 5.0
        return EvaluationOutcome.success(score, f"scored {score}")


def make_questions(difficulties=None, time_limit: int = 20) -> list[Question]:
    difficulties = difficulties or [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]
    return [
        Question(text=f"Question {i + 1}", difficulty=d, time_limit=time_limit)
        for i, d in enumerate(difficulties)
    ]


def make_session(questions=None, **contact) -> InterviewSession:
    fields = {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-123-4567"}
    fields.update(contact)
    session = InterviewSession(**fields)
    if questions:
        session.questions = questions
    return session


@pytest.fixture
def started_machine():
    """A started machine over three questions (Easy, Medium, Hard)."""
    machine = SessionStateMachine(make_session(make_questions()))
    machine.start()
    return machine


@pytest.fixture
def settings():
    return Settings(tick_interval_seconds=0.01, evaluation_timeout_seconds=1.0)


@pytest.fixture
def stub_evaluator():
    return StubEvaluator(scores=[9, 7, 6, 5, 3, 4])


@pytest.fixture
def orchestrator(settings, stub_evaluator):
    return InterviewOrchestrator(
        store=InMemorySessionStore(),
        question_bank=QuestionBank(rng=random.Random(7)),
        evaluator=stub_evaluator,
        settings=settings,
    )
