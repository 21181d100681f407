"""
Interview session and state models for InterviewDesk
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from interviewdesk.models.question import Question


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Session lifecycle states."""

    COLLECTING = "collecting"  # Gathering contact details, no active question
    IN_PROGRESS = "in_progress"  # Questions being asked
    COMPLETED = "completed"  # Terminal


class AdvanceResult(str, Enum):
    """Outcome of moving past a scored question."""

    HAS_MORE_QUESTIONS = "has_more_questions"
    READY_TO_COMPLETE = "ready_to_complete"


CONTACT_FIELDS = ("name", "email", "phone")


class InterviewSession(BaseModel):
    """Complete state of one candidate's interview."""

    # Identification
    session_id: str = Field(default_factory=lambda: str(uuid4()))

    # Candidate
    name: str = ""
    email: str = ""
    phone: str = ""
    resume_text: str = ""
    resume_file_name: str | None = None

    # Questions (fixed once attached)
    questions: list[Question] = Field(default_factory=list)
    cursor: int = Field(default=0, ge=0)

    # State
    status: SessionStatus = SessionStatus.COLLECTING

    # Result (valid once completed)
    final_score: float | None = Field(default=None, ge=0, le=10)
    final_summary: str | None = None

    # Timing
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    def get_current_question(self) -> Question | None:
        """Get the question at the cursor."""
        if self.questions and self.cursor < len(self.questions):
            return self.questions[self.cursor]
        return None

    def missing_contact_fields(self) -> list[str]:
        """Contact fields still empty, in collection order."""
        return [field for field in CONTACT_FIELDS if not getattr(self, field).strip()]

    def questions_answered(self) -> int:
        return sum(1 for q in self.questions if q.is_answered)

    def to_summary(self) -> "SessionSummary":
        return SessionSummary(
            session_id=self.session_id,
            name=self.name,
            email=self.email,
            status=self.status,
            final_score=self.final_score,
            created_at=self.created_at,
            completed_at=self.completed_at,
            questions_answered=self.questions_answered(),
            total_questions=len(self.questions),
        )


class SessionSummary(BaseModel):
    """Condensed view of a session for candidate listings."""

    session_id: str
    name: str
    email: str
    status: SessionStatus
    final_score: float | None = None
    created_at: datetime
    completed_at: datetime | None = None
    questions_answered: int = 0
    total_questions: int = 0
