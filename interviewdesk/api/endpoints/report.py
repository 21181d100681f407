"""
Report API endpoints

Handles:
- Score breakdown retrieval for completed interviews
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from interviewdesk.api.dependencies import get_orchestrator
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.models.report import DifficultyScore

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ReportResponse(BaseModel):
    """Final report for a completed interview."""
    session_id: str
    name: str
    overall_score: float
    tier: str
    by_difficulty: list[DifficultyScore]
    summary: str


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/{session_id}", response_model=ReportResponse)
async def get_report(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> ReportResponse:
    """
    Get the interview report.

    Only available once the interview is complete.
    """
    breakdown = await orchestrator.get_report(session_id)
    session = await orchestrator.get_session(session_id)

    return ReportResponse(
        session_id=session_id,
        name=session.name,
        overall_score=breakdown.overall_score,
        tier=breakdown.tier.value,
        by_difficulty=breakdown.by_difficulty,
        summary=session.final_summary or breakdown.render(),
    )
