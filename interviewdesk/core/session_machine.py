"""
Session State Machine - owns one candidate's interview session.

States:
    COLLECTING → IN_PROGRESS → COMPLETED

Within IN_PROGRESS each question at the cursor goes through:
    activate → (tick ...) → submit → apply_score → advance

The machine never reads the wall clock to decide anything and never
submits on its own: the countdown reaching zero is reported to the
caller, who then submits the no-answer sentinel.
"""

import logging

from interviewdesk.core.errors import (
    AlreadyAnswered,
    InvalidState,
    InvalidTransition,
)
from interviewdesk.models.interview import (
    AdvanceResult,
    InterviewSession,
    SessionStatus,
    utcnow,
)
from interviewdesk.models.question import Question

logger = logging.getLogger(__name__)


class SessionStateMachine:
    """
    Drives a single InterviewSession through its lifecycle.

    The machine is the only writer of the session it wraps. The countdown
    for the active question lives here and is never persisted; a machine
    rebuilt from a stored session starts with no active countdown.
    """

    VALID_TRANSITIONS: dict[SessionStatus, list[SessionStatus]] = {
        SessionStatus.COLLECTING: [SessionStatus.IN_PROGRESS],
        SessionStatus.IN_PROGRESS: [SessionStatus.COMPLETED],
        SessionStatus.COMPLETED: [],  # Terminal state
    }

    def __init__(self, session: InterviewSession):
        self.session = session

        # Countdown for the question at the cursor
        self._time_remaining = 0
        self._question_active = False
        self._activated_index: int | None = None

        self._ready_to_complete = False

    # =========================================================================
    # READ-ONLY VIEW
    # =========================================================================

    @property
    def status(self) -> SessionStatus:
        return self.session.status

    @property
    def current_question(self) -> Question | None:
        return self.session.get_current_question()

    @property
    def is_question_active(self) -> bool:
        return self._question_active

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def ready_to_complete(self) -> bool:
        return self._ready_to_complete

    # =========================================================================
    # COLLECTING
    # =========================================================================

    def update_contact(
        self,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> list[str]:
        """
        Fill in candidate contact fields.

        Returns:
            Contact fields still missing afterwards
        """
        self._require_status(SessionStatus.COLLECTING, "update contact details", InvalidState)

        updates = {"name": name, "email": email, "phone": phone}
        for field, value in updates.items():
            if value is not None:
                setattr(self.session, field, value.strip())

        return self.session.missing_contact_fields()

    def missing_contact_fields(self) -> list[str]:
        return self.session.missing_contact_fields()

    def attach_questions(self, questions: list[Question]) -> None:
        """Attach the question set. Allowed once, before the interview starts."""
        self._require_status(SessionStatus.COLLECTING, "attach questions", InvalidState)
        if self.session.questions:
            raise InvalidState("Questions already attached to this session")
        if not questions:
            raise InvalidState("Cannot attach an empty question set")

        self.session.questions = list(questions)
        logger.info(f"Session {self.session.session_id}: attached {len(questions)} questions")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        """Begin the interview at the first question."""
        if self.session.status != SessionStatus.COLLECTING:
            raise InvalidTransition(f"Cannot start interview in state: {self.session.status.value}")
        if not self.session.questions:
            raise InvalidTransition("Cannot start interview without questions")
        missing = self.session.missing_contact_fields()
        if missing:
            raise InvalidTransition(f"Missing contact details: {', '.join(missing)}")

        self.session.cursor = 0
        self._transition(SessionStatus.IN_PROGRESS)

    def complete(self, final_score: float, summary: str) -> None:
        """Close the session after advance() signalled READY_TO_COMPLETE."""
        if self.session.status != SessionStatus.IN_PROGRESS:
            raise InvalidTransition(f"Cannot complete interview in state: {self.session.status.value}")
        if not self._ready_to_complete:
            raise InvalidTransition("Interview is not ready to complete")
        if not 0 <= final_score <= 10:
            raise ValueError(f"final_score must be within [0, 10], got {final_score}")

        self.session.final_score = final_score
        self.session.final_summary = summary
        self.session.completed_at = utcnow()
        self._ready_to_complete = False
        self._transition(SessionStatus.COMPLETED)

    # =========================================================================
    # QUESTION FLOW
    # =========================================================================

    def activate_current_question(self) -> int:
        """
        Start the countdown for the question at the cursor.

        Returns:
            Seconds remaining
        """
        self._require_status(SessionStatus.IN_PROGRESS, "activate a question", InvalidTransition)
        question = self._current_or_fail()

        if self._question_active:
            return self._time_remaining
        if question.is_answered:
            raise InvalidState("Current question has already been answered")
        if self._activated_index == self.session.cursor:
            raise InvalidState("Time is up for the current question; submit an answer")

        self._time_remaining = question.time_limit
        self._question_active = True
        self._activated_index = self.session.cursor
        logger.info(
            f"Session {self.session.session_id}: question {self.session.cursor + 1} "
            f"active ({question.time_limit}s)"
        )
        return self._time_remaining

    def tick(self) -> int:
        """
        Count the active question down by one second.

        Returns:
            Seconds remaining; 0 once time is up
        """
        if not self._question_active:
            return self._time_remaining

        self._time_remaining = max(0, self._time_remaining - 1)
        if self._time_remaining == 0:
            self._question_active = False
            logger.info(
                f"Session {self.session.session_id}: time up on question {self.session.cursor + 1}"
            )
        return self._time_remaining

    def submit(self, answer: str, elapsed_seconds: int) -> Question:
        """Record the answer for the question at the cursor."""
        self._require_status(SessionStatus.IN_PROGRESS, "submit an answer", InvalidState)
        question = self._current_or_fail()

        if question.is_answered:
            raise AlreadyAnswered(f"Question {question.id} has already been answered")
        if self._activated_index != self.session.cursor:
            raise InvalidState("Current question has not been activated")
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")

        question.answer = answer
        question.time_spent = elapsed_seconds
        question.answered_at = utcnow()
        self._question_active = False

        logger.info(
            f"Session {self.session.session_id}: answer submitted for question "
            f"{self.session.cursor + 1} after {elapsed_seconds}s"
        )
        return question

    def apply_score(
        self,
        score: float,
        feedback: str,
        question_id: str | None = None,
    ) -> Question:
        """
        Record the evaluation of the current answer.

        Args:
            score: Score in [0, 10]
            feedback: Evaluator feedback text
            question_id: Question the result belongs to; a result for any
                question other than the current one is rejected
        """
        self._require_status(SessionStatus.IN_PROGRESS, "apply a score", InvalidState)
        question = self._current_or_fail()

        if question_id is not None and question_id != question.id:
            raise InvalidState(f"Question {question_id} is no longer the current question")
        if not question.is_answered:
            raise InvalidState("Cannot score a question before it is answered")
        if question.is_scored:
            raise InvalidState(f"Question {question.id} has already been scored")
        if not 0 <= score <= 10:
            raise ValueError(f"score must be within [0, 10], got {score}")

        question.score = score
        question.feedback = feedback
        return question

    def abandon_current_question(self, reason: str = "evaluation unavailable") -> Question:
        """
        Give up on scoring the current answer so the interview can move on.

        The question is scored 0; any evaluation result that arrives later
        is rejected.
        """
        self._require_status(SessionStatus.IN_PROGRESS, "abandon a question", InvalidState)
        question = self._current_or_fail()

        if not question.is_answered:
            raise InvalidState("Cannot abandon a question before it is answered")
        if question.is_scored:
            raise InvalidState(f"Question {question.id} has already been scored")

        question.score = 0.0
        question.feedback = f"Not evaluated: {reason}"
        logger.warning(
            f"Session {self.session.session_id}: question {self.session.cursor + 1} abandoned ({reason})"
        )
        return question

    def advance(self) -> AdvanceResult:
        """Move past the scored current question."""
        self._require_status(SessionStatus.IN_PROGRESS, "advance", InvalidState)
        question = self._current_or_fail()

        if not question.is_answered:
            raise InvalidState("Current question has not been answered")
        if not question.is_scored:
            raise InvalidState("Current question has not been scored")

        if self.session.cursor < len(self.session.questions) - 1:
            self.session.cursor += 1
            self._time_remaining = 0
            self._question_active = False
            return AdvanceResult.HAS_MORE_QUESTIONS

        self._ready_to_complete = True
        return AdvanceResult.READY_TO_COMPLETE

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _current_or_fail(self) -> Question:
        question = self.session.get_current_question()
        if question is None:
            raise InvalidState("No question at the cursor")
        return question

    def _require_status(
        self,
        expected: SessionStatus,
        action: str,
        error: type[Exception],
    ) -> None:
        if self.session.status != expected:
            raise error(f"Cannot {action} in state: {self.session.status.value}")

    def _transition(self, new_status: SessionStatus) -> None:
        old_status = self.session.status
        valid_next = self.VALID_TRANSITIONS.get(old_status, [])
        if new_status not in valid_next:
            raise InvalidTransition(
                f"Invalid transition from {old_status.value} to {new_status.value}"
            )
        self.session.status = new_status
        logger.info(f"Session {self.session.session_id}: {old_status.value} → {new_status.value}")
