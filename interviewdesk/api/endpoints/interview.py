"""
Interview API endpoints

Handles interview session lifecycle:
- Creating sessions (directly or from a resume upload)
- Collecting contact details
- Generating questions and starting interviews
- Activating, timing and answering questions
- Evaluating, advancing and completing
"""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, Field

from interviewdesk.api.dependencies import get_orchestrator
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.models.interview import InterviewSession, SessionSummary
from interviewdesk.models.question import Question

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CreateSessionRequest(BaseModel):
    """Request model for opening a session."""
    name: str = ""
    email: str = ""
    phone: str = ""


class ContactRequest(BaseModel):
    """Contact fields to fill in; omitted fields are left as they are."""
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class ContactResponse(BaseModel):
    session_id: str
    missing_fields: list[str]


class SubmitAnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    answer: str
    elapsed_seconds: int = Field(..., ge=0)
    evaluate: bool = True


class AbandonRequest(BaseModel):
    reason: str = "evaluation unavailable"


class TimerResponse(BaseModel):
    """Countdown state of the current question."""
    session_id: str
    active: bool
    time_remaining: int


class AdvanceResponse(BaseModel):
    session_id: str
    result: str
    cursor: int


class SessionResponse(BaseModel):
    """Full session view including the live countdown."""
    session_id: str
    name: str
    email: str
    phone: str
    resume_file_name: str | None
    status: str
    cursor: int
    total_questions: int
    questions: list[Question]
    missing_fields: list[str]
    question_active: bool
    time_remaining: int
    final_score: float | None
    final_summary: str | None
    created_at: datetime
    completed_at: datetime | None


async def _session_response(
    orchestrator: InterviewOrchestrator,
    session: InterviewSession,
) -> SessionResponse:
    active, remaining = await orchestrator.get_timer(session.session_id)
    return SessionResponse(
        session_id=session.session_id,
        name=session.name,
        email=session.email,
        phone=session.phone,
        resume_file_name=session.resume_file_name,
        status=session.status.value,
        cursor=session.cursor,
        total_questions=len(session.questions),
        questions=session.questions,
        missing_fields=session.missing_contact_fields(),
        question_active=active,
        time_remaining=remaining,
        final_score=session.final_score,
        final_summary=session.final_summary,
        created_at=session.created_at,
        completed_at=session.completed_at,
    )


# ============================================================================
# SESSIONS
# ============================================================================

@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """
    Create a new interview session.

    Contact details may be supplied now or collected later.
    """
    session = await orchestrator.create_session(
        name=request.name,
        email=request.email,
        phone=request.phone,
    )
    return await _session_response(orchestrator, session)


@router.post("/resume", response_model=SessionResponse, status_code=201)
async def create_session_from_resume(
    file: UploadFile = File(...),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """
    Create a session from an uploaded PDF or DOCX resume.

    Name, email and phone are prefilled when they can be found.
    """
    # Read at most one byte past the size limit
    data = await file.read(orchestrator.resume_parser.max_bytes + 1)
    session = await orchestrator.create_session_from_resume(
        data,
        media_type=file.content_type or "",
        file_name=file.filename,
    )
    return await _session_response(orchestrator, session)


@router.get("", response_model=list[SessionSummary])
async def list_sessions(
    search: str | None = None,
    sort_by: Literal["name", "score", "date"] = "date",
    order: Literal["asc", "desc"] = "desc",
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> list[SessionSummary]:
    """List candidates, optionally filtered by name/email and sorted."""
    return await orchestrator.list_sessions(search=search, sort_by=sort_by, order=order)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Get the current state of an interview session."""
    session = await orchestrator.get_session(session_id)
    return await _session_response(orchestrator, session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> None:
    await orchestrator.delete_session(session_id)


@router.patch("/{session_id}/contact", response_model=ContactResponse)
async def update_contact(
    session_id: str,
    request: ContactRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> ContactResponse:
    """Fill in missing contact details before the interview starts."""
    missing = await orchestrator.update_contact(
        session_id,
        name=request.name,
        email=request.email,
        phone=request.phone,
    )
    return ContactResponse(session_id=session_id, missing_fields=missing)


# ============================================================================
# INTERVIEW FLOW
# ============================================================================

@router.post("/{session_id}/questions", response_model=list[Question])
async def generate_questions(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> list[Question]:
    """Draw the question set using the configured difficulty policy."""
    return await orchestrator.generate_questions(session_id)


@router.post("/{session_id}/start", response_model=SessionResponse)
async def start_interview(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """
    Start the interview.

    Requires questions and complete contact details.
    """
    session = await orchestrator.start_interview(session_id)
    return await _session_response(orchestrator, session)


@router.post("/{session_id}/activate", response_model=TimerResponse)
async def activate_question(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> TimerResponse:
    """Show the current question and start its countdown."""
    remaining = await orchestrator.activate_question(session_id)
    return TimerResponse(session_id=session_id, active=True, time_remaining=remaining)


@router.post("/{session_id}/tick", response_model=TimerResponse)
async def tick(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> TimerResponse:
    """Count the current question down by one second."""
    await orchestrator.tick(session_id)
    active, remaining = await orchestrator.get_timer(session_id)
    return TimerResponse(session_id=session_id, active=active, time_remaining=remaining)


@router.post("/{session_id}/answer", response_model=Question)
async def submit_answer(
    session_id: str,
    request: SubmitAnswerRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Question:
    """
    Submit an answer to the current question.

    Evaluation runs in the background; poll the session for the score.
    """
    return await orchestrator.submit_answer(
        session_id,
        answer=request.answer,
        elapsed_seconds=request.elapsed_seconds,
        evaluate=request.evaluate,
    )


@router.post("/{session_id}/timeout", response_model=Question)
async def submit_timeout(
    session_id: str,
    evaluate: bool = True,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Question:
    """Record that time ran out without an answer."""
    return await orchestrator.submit_timeout(session_id, evaluate=evaluate)


@router.post("/{session_id}/evaluate", response_model=Question)
async def evaluate_answer(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Question:
    """Score the current answer now, or retry after a failed evaluation."""
    return await orchestrator.evaluate_answer(session_id)


@router.post("/{session_id}/abandon", response_model=Question)
async def abandon_question(
    session_id: str,
    request: AbandonRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Question:
    """Give up on scoring the current answer so the interview can continue."""
    return await orchestrator.abandon_question(session_id, reason=request.reason)


@router.post("/{session_id}/advance", response_model=AdvanceResponse)
async def advance(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> AdvanceResponse:
    """Move to the next question, or signal that the interview can be completed."""
    result = await orchestrator.advance(session_id)
    session = await orchestrator.get_session(session_id)
    return AdvanceResponse(session_id=session_id, result=result.value, cursor=session.cursor)


@router.post("/{session_id}/complete", response_model=SessionResponse)
async def complete_interview(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Compute the final score and close the interview."""
    session = await orchestrator.complete_interview(session_id)
    return await _session_response(orchestrator, session)
