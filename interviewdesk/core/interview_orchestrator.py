"""
Interview Orchestrator - coordinates sessions, timers, scoring and storage.

This is the single sequential actor for every session it manages. It
wraps each session in a SessionStateMachine, serializes state-mutating
calls per session, runs the countdown ticker, schedules evaluation
without holding the session lock, and saves every change to the
session store.
"""

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable

from interviewdesk.config.settings import Settings, get_settings
from interviewdesk.core.aggregator import aggregate, build_breakdown
from interviewdesk.core.countdown import CountdownTicker
from interviewdesk.core.errors import (
    EvaluationFailed,
    InterviewError,
    InvalidState,
    InvalidTransition,
    SessionNotFound,
)
from interviewdesk.core.evaluator import Evaluator
from interviewdesk.core.question_bank import QuestionBank, default_policy
from interviewdesk.core.resume_parser import ResumeParser
from interviewdesk.core.session_machine import SessionStateMachine
from interviewdesk.core.session_store import SessionStore, SortKey, SortOrder
from interviewdesk.models.evaluation import EvaluationOutcome
from interviewdesk.models.interview import (
    AdvanceResult,
    InterviewSession,
    SessionStatus,
    SessionSummary,
)
from interviewdesk.models.question import NO_ANSWER, Difficulty, DifficultyPolicy, Question
from interviewdesk.models.report import ScoreBreakdown

logger = logging.getLogger(__name__)


class InterviewOrchestrator:
    """
    Manages interview sessions on top of the session state machine.

    The orchestrator coordinates between:
    - Question Bank (question set generation)
    - Evaluator (answer scoring)
    - Aggregator (final score and summary)
    - Session Store (persistence)
    """

    def __init__(
        self,
        store: SessionStore,
        question_bank: QuestionBank,
        evaluator: Evaluator,
        resume_parser: ResumeParser | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            store: Where session snapshots are saved
            question_bank: Draws question sets
            evaluator: Scores submitted answers
            resume_parser: Extracts contact details from uploads
            settings: Application settings
        """
        self.store = store
        self.question_bank = question_bank
        self.evaluator = evaluator
        self.resume_parser = resume_parser or ResumeParser()
        self.settings = settings or get_settings()

        # Live machines hold the countdown, which is never persisted
        self._machines: dict[str, SessionStateMachine] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._tickers: dict[str, CountdownTicker] = {}
        self._evaluations: dict[str, asyncio.Task] = {}

        # Event callbacks
        self._time_up_callbacks: list[Callable[[str, Question], Awaitable[None]]] = []
        self._evaluation_callbacks: list[Callable[[str, Question], Awaitable[None]]] = []

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    async def create_session(
        self,
        name: str = "",
        email: str = "",
        phone: str = "",
        resume_text: str = "",
        resume_file_name: str | None = None,
    ) -> InterviewSession:
        """Create a new session in COLLECTING state."""
        session = InterviewSession(
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
            resume_text=resume_text,
            resume_file_name=resume_file_name,
        )
        self._machines[session.session_id] = SessionStateMachine(session)
        await self.store.save(session)

        logger.info(f"Created interview session: {session.session_id}")
        return session

    async def create_session_from_resume(
        self,
        data: bytes,
        media_type: str,
        file_name: str | None = None,
    ) -> InterviewSession:
        """Parse a resume upload and open a session prefilled with its contact details."""
        resume = await asyncio.to_thread(self.resume_parser.parse, data, media_type, file_name)
        return await self.create_session(
            name=resume.name or "",
            email=resume.email or "",
            phone=resume.phone or "",
            resume_text=resume.text,
            resume_file_name=file_name,
        )

    async def get_session(self, session_id: str) -> InterviewSession:
        """Get the latest saved snapshot of a session."""
        return await self.store.get(session_id)

    async def list_sessions(
        self,
        search: str | None = None,
        sort_by: SortKey = "date",
        order: SortOrder = "desc",
    ) -> list[SessionSummary]:
        return await self.store.list(search=search, sort_by=sort_by, order=order)

    async def delete_session(self, session_id: str) -> None:
        """Delete a session and drop its timer and pending evaluation."""
        async with self._lock(session_id):
            await self._stop_ticker(session_id)
            task = self._evaluations.pop(session_id, None)
            if task is not None and not task.done():
                task.cancel()
            self._machines.pop(session_id, None)
            await self.store.delete(session_id)
        self._locks.pop(session_id, None)

    async def get_timer(self, session_id: str) -> tuple[bool, int]:
        """(question active, seconds remaining) for the session's countdown."""
        machine = await self._machine(session_id)
        return machine.is_question_active, machine.time_remaining

    # =========================================================================
    # COLLECTING
    # =========================================================================

    async def update_contact(
        self,
        session_id: str,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> list[str]:
        """
        Fill in contact details.

        Returns:
            Fields still missing
        """
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            missing = machine.update_contact(name=name, email=email, phone=phone)
            await self.store.save(machine.session)
        return missing

    async def generate_questions(
        self,
        session_id: str,
        policy: dict[Difficulty, DifficultyPolicy] | None = None,
    ) -> list[Question]:
        """Draw and attach the question set. ConfigurationError leaves the session untouched."""
        questions = self.question_bank.draw(policy or default_policy(self.settings))

        async with self._lock(session_id):
            machine = await self._machine(session_id)
            machine.attach_questions(questions)
            await self.store.save(machine.session)
        return questions

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def start_interview(self, session_id: str) -> InterviewSession:
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            machine.start()
            await self.store.save(machine.session)
            return machine.session.model_copy(deep=True)

    async def activate_question(self, session_id: str) -> int:
        """
        Start the countdown for the current question and its ticker.

        Returns:
            Seconds remaining
        """
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            remaining = machine.activate_current_question()
            self._start_ticker(session_id)
        return remaining

    async def tick(self, session_id: str) -> int:
        """Tick the countdown by hand (for callers that drive their own clock)."""
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            remaining, expired = self._tick_locked(machine)
        if expired is not None:
            await self._notify_time_up(session_id, expired)
        return remaining

    async def submit_answer(
        self,
        session_id: str,
        answer: str,
        elapsed_seconds: int,
        evaluate: bool = True,
    ) -> Question:
        """
        Submit an answer for the current question.

        The countdown is stopped before the answer is recorded. Evaluation
        is scheduled in the background when ``evaluate`` is set; the
        submit itself never waits for it.
        """
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            question = await self._submit_locked(
                session_id, machine, answer.strip() or NO_ANSWER, elapsed_seconds
            )

        if evaluate:
            self._schedule_evaluation(session_id)
        return question

    async def submit_timeout(self, session_id: str, evaluate: bool = True) -> Question:
        """Submit the no-answer sentinel once the caller has seen time run out."""
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            question = machine.current_question
            if question is None:
                raise InvalidState("No question at the cursor")
            elapsed = question.time_limit - machine.time_remaining
            question = await self._submit_locked(session_id, machine, NO_ANSWER, elapsed)

        if evaluate:
            self._schedule_evaluation(session_id)
        return question

    async def evaluate_answer(self, session_id: str) -> Question:
        """
        Score the current answer. Safe to call again after EvaluationFailed.

        Joins the evaluation already running for the session, if any, so
        the evaluator is called once per attempt. A new attempt starts
        only when none is in flight.

        Raises:
            EvaluationFailed: The evaluator could not score the answer
            InvalidState: Nothing to score, or the result arrived too late
            SessionNotFound: The session was deleted while being scored
        """
        task = self._evaluations.get(session_id)
        if task is None or task.done():
            task = self._schedule_evaluation(session_id)

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled() and session_id not in self._machines:
                raise SessionNotFound(f"Session not found: {session_id}")
            raise

    async def wait_for_evaluation(self, session_id: str) -> None:
        """Wait for a pending evaluation, if any. Its outcome is left to the session state."""
        task = self._evaluations.get(session_id)
        if task is not None:
            await asyncio.wait({task})

    async def abandon_question(self, session_id: str, reason: str = "evaluation unavailable") -> Question:
        """Stop waiting for a score so the interview can advance."""
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            question = machine.abandon_current_question(reason)
            await self.store.save(machine.session)
            return question.model_copy()

    async def advance(self, session_id: str) -> AdvanceResult:
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            result = machine.advance()
            await self.store.save(machine.session)
        return result

    async def complete_interview(self, session_id: str) -> InterviewSession:
        """Aggregate the scores and close the session."""
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            if machine.status != SessionStatus.IN_PROGRESS or not machine.ready_to_complete:
                raise InvalidTransition(
                    f"Interview is not ready to complete (state: {machine.status.value})"
                )
            final_score, summary = aggregate(machine.session.questions)
            machine.complete(final_score, summary)
            await self.store.save(machine.session)
            logger.info(f"Session {session_id}: final score {final_score}")
            return machine.session.model_copy(deep=True)

    async def get_report(self, session_id: str) -> ScoreBreakdown:
        """Structured score breakdown of a completed session."""
        session = await self.store.get(session_id)
        if session.status != SessionStatus.COMPLETED:
            raise InvalidState(f"Interview not complete. Current state: {session.status.value}")
        return build_breakdown(session.questions)

    async def close(self) -> None:
        """Stop all tickers and pending evaluations."""
        for session_id in list(self._tickers):
            await self._stop_ticker(session_id)
        for task in self._evaluations.values():
            if not task.done():
                task.cancel()
        self._evaluations.clear()

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    async def _machine(self, session_id: str) -> SessionStateMachine:
        """Live machine for a session, rebuilt from the store when needed."""
        machine = self._machines.get(session_id)
        if machine is None:
            session = await self.store.get(session_id)
            machine = self._machines[session_id] = SessionStateMachine(session)
            logger.info(f"Resumed session {session_id} at question {session.cursor + 1}")
        return machine

    def _tick_locked(self, machine: SessionStateMachine) -> tuple[int, Question | None]:
        """Tick once; also return the question whose time just ran out, if any."""
        was_active = machine.is_question_active
        remaining = machine.tick()
        if was_active and not machine.is_question_active:
            return remaining, machine.current_question.model_copy()
        return remaining, None

    async def _notify_time_up(self, session_id: str, question: Question) -> None:
        for callback in self._time_up_callbacks:
            try:
                await callback(session_id, question)
            except Exception as e:
                logger.error(f"Time-up callback error: {e}")

    async def _submit_locked(
        self,
        session_id: str,
        machine: SessionStateMachine,
        answer: str,
        elapsed_seconds: int,
    ) -> Question:
        await self._stop_ticker(session_id)
        question = machine.submit(answer, elapsed_seconds)
        await self.store.save(machine.session)
        return question.model_copy()

    def _start_ticker(self, session_id: str) -> None:
        ticker = self._tickers.get(session_id)
        if ticker is not None and ticker.running:
            return

        async def tick() -> int:
            async with self._lock(session_id):
                machine = self._machines.get(session_id)
                if machine is None or not machine.is_question_active:
                    return 0
                remaining, expired = self._tick_locked(machine)
            if expired is not None:
                await self._notify_time_up(session_id, expired)
            return remaining

        ticker = CountdownTicker(tick, interval_seconds=self.settings.tick_interval_seconds)
        self._tickers[session_id] = ticker
        ticker.start()

    async def _stop_ticker(self, session_id: str) -> None:
        ticker = self._tickers.pop(session_id, None)
        if ticker is not None:
            await ticker.stop()

    def _schedule_evaluation(self, session_id: str) -> asyncio.Task:
        task = asyncio.create_task(self._evaluate(session_id))
        self._evaluations[session_id] = task
        task.add_done_callback(partial(self._evaluation_done, session_id))
        return task

    async def _evaluate(self, session_id: str) -> Question:
        """
        One evaluation attempt for the current answer.

        The evaluator runs without the session lock. If the session moved
        on or disappeared while it ran, the result is rejected.
        """
        async with self._lock(session_id):
            machine = await self._machine(session_id)
            question = machine.current_question
            if question is None or not question.is_answered:
                raise InvalidState("Current question has not been answered")
            if question.is_scored:
                raise InvalidState(f"Question {question.id} has already been scored")
            question = question.model_copy()

        outcome: EvaluationOutcome = await self.evaluator.evaluate(
            question.text,
            question.answer,
            question.time_spent or 0,
        )
        if not outcome.ok:
            logger.warning(f"Session {session_id}: evaluation failed: {outcome.error}")
            raise EvaluationFailed(outcome.error)

        async with self._lock(session_id):
            machine = self._machines.get(session_id)
            if machine is None:
                raise SessionNotFound(f"Session not found: {session_id}")
            scored = machine.apply_score(outcome.score, outcome.feedback, question_id=question.id)
            await self.store.save(machine.session)
            scored = scored.model_copy()

        for callback in self._evaluation_callbacks:
            try:
                await callback(session_id, scored)
            except Exception as e:
                logger.error(f"Evaluation callback error: {e}")

        return scored

    def _evaluation_done(self, session_id: str, task: asyncio.Task) -> None:
        if self._evaluations.get(session_id) is task:
            self._evaluations.pop(session_id, None)
        if task.cancelled():
            return

        error = task.exception()
        if isinstance(error, EvaluationFailed):
            # advance() stays blocked until a retry succeeds or the question is abandoned
            logger.info(f"Session {session_id}: awaiting evaluation retry")
        elif isinstance(error, InterviewError):
            logger.warning(f"Session {session_id}: discarded evaluation result: {error.message}")
        elif error is not None:
            logger.error(f"Session {session_id}: evaluation error: {error}")

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_time_up(self, callback: Callable[[str, Question], Awaitable[None]]) -> None:
        """Register a callback for a countdown reaching zero."""
        self._time_up_callbacks.append(callback)

    def on_evaluation(self, callback: Callable[[str, Question], Awaitable[None]]) -> None:
        """Register a callback for a scored answer."""
        self._evaluation_callbacks.append(callback)
