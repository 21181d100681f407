"""
API Dependencies

Provides dependency injection for API endpoints.
Manages the singleton orchestrator and its components.
"""

from interviewdesk.config.settings import get_settings
from interviewdesk.core.evaluator import HeuristicEvaluator
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.core.question_bank import QuestionBank
from interviewdesk.core.resume_parser import ResumeParser
from interviewdesk.core.session_store import InMemorySessionStore


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_orchestrator: InterviewOrchestrator | None = None


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        settings = get_settings()
        _orchestrator = InterviewOrchestrator(
            store=InMemorySessionStore(),
            question_bank=QuestionBank(),
            evaluator=HeuristicEvaluator(timeout_seconds=settings.evaluation_timeout_seconds),
            resume_parser=ResumeParser(max_bytes=settings.max_resume_bytes),
            settings=settings,
        )

    return _orchestrator


async def cleanup():
    """Cleanup resources on shutdown."""
    global _orchestrator

    if _orchestrator:
        await _orchestrator.close()

    _orchestrator = None
