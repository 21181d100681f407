import asyncio
import random

import pytest

from interviewdesk.config.settings import Settings
from interviewdesk.core.aggregator import aggregate
from interviewdesk.core.errors import (
    AlreadyAnswered,
    ConfigurationError,
    EvaluationFailed,
    IncompleteScoring,
    InvalidState,
    InvalidTransition,
    SessionNotFound,
)
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.core.question_bank import QuestionBank
from interviewdesk.core.session_store import InMemorySessionStore
from interviewdesk.models.interview import AdvanceResult, SessionStatus
from interviewdesk.models.question import NO_ANSWER, Difficulty, DifficultyPolicy
from interviewdesk.models.report import ScoreTier

from tests.conftest import StubEvaluator


CONTACT = {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-123-4567"}


class GatedEvaluator(StubEvaluator):
    """Holds every evaluation until ``release`` is set."""

    def __init__(self, scores=None):
        super().__init__(scores=scores)
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def score_answer(self, question_text, answer_text, elapsed_seconds):
        self.started.set()
        await self.release.wait()
        return await super().score_answer(question_text, answer_text, elapsed_seconds)


def _orchestrator(evaluator, tick_interval=60.0, catalog=None):
    return InterviewOrchestrator(
        store=InMemorySessionStore(),
        question_bank=QuestionBank(catalog=catalog, rng=random.Random(7)),
        evaluator=evaluator,
        settings=Settings(tick_interval_seconds=tick_interval, evaluation_timeout_seconds=1.0),
    )


async def _started(orchestrator, policy=None):
    session = await orchestrator.create_session(**CONTACT)
    await orchestrator.generate_questions(session.session_id, policy)
    await orchestrator.start_interview(session.session_id)
    return session.session_id


def _single_easy(time_limit=20):
    return {Difficulty.EASY: DifficultyPolicy(count=1, time_limit=time_limit)}


# ---------------------------------------------------------------------------
# Full interview
# ---------------------------------------------------------------------------

async def test_full_interview_with_background_evaluation():
    evaluator = StubEvaluator(scores=[9, 7, 6, 5, 3, 4])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator)

    results = []
    for i in range(6):
        await orchestrator.activate_question(session_id)
        await orchestrator.submit_answer(session_id, f"answer {i}", 10)
        await orchestrator.wait_for_evaluation(session_id)
        results.append(await orchestrator.advance(session_id))

    assert results == [AdvanceResult.HAS_MORE_QUESTIONS] * 5 + [AdvanceResult.READY_TO_COMPLETE]

    session = await orchestrator.complete_interview(session_id)
    assert session.status == SessionStatus.COMPLETED
    assert session.final_score == 5.7
    assert session.final_summary.startswith("Overall Score: 5.7/10\nTier: Average")

    stored = await orchestrator.get_session(session_id)
    assert stored.status == SessionStatus.COMPLETED
    assert [q.score for q in stored.questions] == [9, 7, 6, 5, 3, 4]

    report = await orchestrator.get_report(session_id)
    assert report.overall_score == 5.7
    assert report.tier == ScoreTier.AVERAGE

    await orchestrator.close()


async def test_evaluation_receives_question_answer_and_elapsed():
    evaluator = StubEvaluator(scores=[6])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())

    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "  props flow down  ", 14, evaluate=False)
    scored = await orchestrator.evaluate_answer(session_id)

    question_text, answer, elapsed = evaluator.calls[0]
    assert answer == "props flow down"
    assert elapsed == 14
    assert question_text == scored.text
    assert scored.score == 6


async def test_blank_answer_is_recorded_as_no_answer(orchestrator):
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)

    question = await orchestrator.submit_answer(session_id, "   ", 3, evaluate=False)

    assert question.answer == NO_ANSWER
    await orchestrator.close()


async def test_second_submit_is_already_answered(orchestrator):
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "first", 3, evaluate=False)

    with pytest.raises(AlreadyAnswered):
        await orchestrator.submit_answer(session_id, "second", 4, evaluate=False)

    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].answer == "first"


async def test_complete_before_last_advance_is_invalid():
    orchestrator = _orchestrator(StubEvaluator(scores=[8]))
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)
    await orchestrator.evaluate_answer(session_id)

    with pytest.raises(InvalidTransition):
        await orchestrator.complete_interview(session_id)

    await orchestrator.advance(session_id)
    session = await orchestrator.complete_interview(session_id)
    assert session.final_score == 8.0


async def test_report_requires_completed_session(orchestrator):
    session_id = await _started(orchestrator, _single_easy())

    with pytest.raises(InvalidState):
        await orchestrator.get_report(session_id)


# ---------------------------------------------------------------------------
# Collecting
# ---------------------------------------------------------------------------

async def test_start_is_gated_on_contact_details(orchestrator):
    session = await orchestrator.create_session(name="Ada Lovelace")
    await orchestrator.generate_questions(session.session_id)

    with pytest.raises(InvalidTransition):
        await orchestrator.start_interview(session.session_id)

    missing = await orchestrator.update_contact(session.session_id, email="ada@example.com")
    assert missing == ["phone"]

    missing = await orchestrator.update_contact(session.session_id, phone="555-123-4567")
    assert missing == []

    started = await orchestrator.start_interview(session.session_id)
    assert started.status == SessionStatus.IN_PROGRESS
    assert len(started.questions) == 6


async def test_configuration_error_leaves_session_untouched():
    orchestrator = _orchestrator(StubEvaluator(), catalog={Difficulty.EASY: []})
    session = await orchestrator.create_session(**CONTACT)

    with pytest.raises(ConfigurationError):
        await orchestrator.generate_questions(session.session_id, _single_easy())

    stored = await orchestrator.get_session(session.session_id)
    assert stored.questions == []
    assert stored.status == SessionStatus.COLLECTING


async def test_unknown_session_is_not_found(orchestrator):
    with pytest.raises(SessionNotFound):
        await orchestrator.start_interview("missing")
    with pytest.raises(SessionNotFound):
        await orchestrator.delete_session("missing")


async def test_machine_is_rebuilt_from_store():
    store = InMemorySessionStore()
    first = InterviewOrchestrator(
        store=store,
        question_bank=QuestionBank(rng=random.Random(1)),
        evaluator=StubEvaluator(),
        settings=Settings(tick_interval_seconds=60),
    )
    session_id = await _started(first, _single_easy())

    second = InterviewOrchestrator(
        store=store,
        question_bank=QuestionBank(),
        evaluator=StubEvaluator(scores=[7]),
        settings=Settings(tick_interval_seconds=60),
    )
    assert await second.get_timer(session_id) == (False, 0)

    await second.activate_question(session_id)
    await second.submit_answer(session_id, "answer", 5, evaluate=False)
    scored = await second.evaluate_answer(session_id)
    assert scored.score == 7
    await second.close()


# ---------------------------------------------------------------------------
# Evaluation failures
# ---------------------------------------------------------------------------

async def test_failed_evaluation_blocks_advance_until_retry():
    evaluator = StubEvaluator(scores=[8], failures=1)
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)

    with pytest.raises(EvaluationFailed):
        await orchestrator.evaluate_answer(session_id)

    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].answer == "answer"
    assert stored.questions[0].score is None

    with pytest.raises(InvalidState):
        await orchestrator.advance(session_id)

    scored = await orchestrator.evaluate_answer(session_id)
    assert scored.score == 8
    assert await orchestrator.advance(session_id) == AdvanceResult.READY_TO_COMPLETE


async def test_background_failure_leaves_question_retryable():
    orchestrator = _orchestrator(StubEvaluator(scores=[6], failures=1))
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)

    await orchestrator.submit_answer(session_id, "answer", 5)
    await orchestrator.wait_for_evaluation(session_id)

    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].score is None

    scored = await orchestrator.evaluate_answer(session_id)
    assert scored.score == 6


async def test_abandon_scores_zero_and_allows_advance():
    orchestrator = _orchestrator(StubEvaluator(failures=5))
    session_id = await _started(orchestrator)
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)

    question = await orchestrator.abandon_question(session_id, "evaluator offline")

    assert question.score == 0.0
    assert "evaluator offline" in question.feedback
    assert await orchestrator.advance(session_id) == AdvanceResult.HAS_MORE_QUESTIONS


async def test_late_result_after_abandon_is_rejected():
    evaluator = GatedEvaluator(scores=[9])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator)
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)

    pending = asyncio.create_task(orchestrator.evaluate_answer(session_id))
    await evaluator.started.wait()

    await orchestrator.abandon_question(session_id, "took too long")
    await orchestrator.advance(session_id)
    evaluator.release.set()

    with pytest.raises(InvalidState):
        await pending

    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].score == 0.0
    assert stored.questions[1].score is None


async def test_late_result_after_delete_is_discarded():
    evaluator = GatedEvaluator(scores=[9])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)

    pending = asyncio.create_task(orchestrator.evaluate_answer(session_id))
    await evaluator.started.wait()

    await orchestrator.delete_session(session_id)
    evaluator.release.set()

    with pytest.raises(SessionNotFound):
        await pending
    with pytest.raises(SessionNotFound):
        await orchestrator.get_session(session_id)


async def test_manual_evaluate_joins_background_evaluation():
    evaluator = GatedEvaluator(scores=[9, 2])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)

    await orchestrator.submit_answer(session_id, "answer", 5)
    await evaluator.started.wait()

    manual = asyncio.create_task(orchestrator.evaluate_answer(session_id))
    await asyncio.sleep(0)
    evaluator.release.set()

    scored = await manual
    await orchestrator.wait_for_evaluation(session_id)

    assert len(evaluator.calls) == 1
    assert scored.score == 9
    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].score == 9


async def test_concurrent_manual_evaluations_share_one_call():
    evaluator = GatedEvaluator(scores=[7, 1])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)

    first = asyncio.create_task(orchestrator.evaluate_answer(session_id))
    second = asyncio.create_task(orchestrator.evaluate_answer(session_id))
    await evaluator.started.wait()
    evaluator.release.set()

    results = await asyncio.gather(first, second)

    assert len(evaluator.calls) == 1
    assert [q.score for q in results] == [7, 7]


async def test_evaluate_after_success_is_invalid_without_new_call():
    evaluator = StubEvaluator(scores=[6, 1])
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5)
    await orchestrator.wait_for_evaluation(session_id)

    with pytest.raises(InvalidState):
        await orchestrator.evaluate_answer(session_id)
    assert len(evaluator.calls) == 1


async def test_retry_after_failure_calls_evaluator_again():
    evaluator = StubEvaluator(scores=[4], failures=1)
    orchestrator = _orchestrator(evaluator)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5)
    await orchestrator.wait_for_evaluation(session_id)

    scored = await orchestrator.evaluate_answer(session_id)

    assert len(evaluator.calls) == 2
    assert scored.score == 4


async def test_evaluation_callbacks_receive_scored_question():
    orchestrator = _orchestrator(StubEvaluator(scores=[7.5]))
    seen = []

    async def record(session_id, question):
        seen.append((session_id, question.score))

    orchestrator.on_evaluation(record)
    session_id = await _started(orchestrator, _single_easy())
    await orchestrator.activate_question(session_id)
    await orchestrator.submit_answer(session_id, "answer", 5, evaluate=False)
    await orchestrator.evaluate_answer(session_id)

    assert seen == [(session_id, 7.5)]


async def test_evaluate_without_answer_is_invalid(orchestrator):
    session_id = await _started(orchestrator, _single_easy())

    with pytest.raises(InvalidState):
        await orchestrator.evaluate_answer(session_id)


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------

async def test_ticker_expiry_notifies_without_submitting(orchestrator):
    expired = asyncio.Event()
    seen = []

    async def on_time_up(session_id, question):
        seen.append((session_id, question.answer))
        expired.set()

    orchestrator.on_time_up(on_time_up)
    session_id = await _started(orchestrator, _single_easy(time_limit=2))

    assert await orchestrator.activate_question(session_id) == 2
    await asyncio.wait_for(expired.wait(), timeout=2)

    assert seen == [(session_id, None)]
    assert await orchestrator.get_timer(session_id) == (False, 0)

    stored = await orchestrator.get_session(session_id)
    assert stored.questions[0].answer is None

    question = await orchestrator.submit_timeout(session_id, evaluate=False)
    assert question.answer == NO_ANSWER
    assert question.time_spent == 2

    scored = await orchestrator.evaluate_answer(session_id)
    assert scored.score == 9
    await orchestrator.close()


async def test_manual_tick_counts_down():
    orchestrator = _orchestrator(StubEvaluator())
    session_id = await _started(orchestrator, _single_easy(time_limit=5))
    await orchestrator.activate_question(session_id)

    assert await orchestrator.tick(session_id) == 4
    assert await orchestrator.tick(session_id) == 3
    assert await orchestrator.get_timer(session_id) == (True, 3)

    question = await orchestrator.submit_answer(session_id, "quick", 2, evaluate=False)
    assert question.time_spent == 2
    assert await orchestrator.get_timer(session_id) == (False, 3)
    await orchestrator.close()


async def test_submit_timeout_before_expiry_uses_elapsed_time():
    orchestrator = _orchestrator(StubEvaluator())
    session_id = await _started(orchestrator, _single_easy(time_limit=10))
    await orchestrator.activate_question(session_id)
    await orchestrator.tick(session_id)
    await orchestrator.tick(session_id)
    await orchestrator.tick(session_id)

    question = await orchestrator.submit_timeout(session_id, evaluate=False)

    assert question.answer == NO_ANSWER
    assert question.time_spent == 3


async def test_aggregate_guard_surfaces_incomplete_scoring():
    orchestrator = _orchestrator(StubEvaluator())
    session_id = await _started(orchestrator)
    session = await orchestrator.get_session(session_id)

    with pytest.raises(IncompleteScoring):
        aggregate(session.questions)


async def test_list_sessions_search_and_sort():
    orchestrator = _orchestrator(StubEvaluator())
    await orchestrator.create_session(name="Grace Hopper", email="grace@navy.mil", phone="1")
    await orchestrator.create_session(**CONTACT)

    names = [s.name for s in await orchestrator.list_sessions(sort_by="name", order="asc")]
    assert names == ["Ada Lovelace", "Grace Hopper"]

    found = await orchestrator.list_sessions(search="navy")
    assert [s.name for s in found] == ["Grace Hopper"]
