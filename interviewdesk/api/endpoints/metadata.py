"""
Metadata API endpoints

Provides reference data for:
- Question difficulty policy
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from interviewdesk.api.dependencies import get_orchestrator
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.core.question_bank import default_policy
from interviewdesk.models.question import Difficulty

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class DifficultyInfo(BaseModel):
    """Question policy for one difficulty."""
    difficulty: str
    count: int
    time_limit_seconds: int
    catalog_size: int


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/difficulties")
async def get_difficulties(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> list[DifficultyInfo]:
    """Get question counts and time limits, easiest first."""
    policy = default_policy(orchestrator.settings)
    return [
        DifficultyInfo(
            difficulty=difficulty.value,
            count=policy[difficulty].count,
            time_limit_seconds=policy[difficulty].time_limit,
            catalog_size=len(orchestrator.question_bank.catalog[difficulty]),
        )
        for difficulty in Difficulty.ordered()
    ]
