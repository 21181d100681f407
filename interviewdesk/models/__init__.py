"""
Data models and schemas for InterviewDesk

Contains Pydantic models for:
- Interview sessions
- Questions and answers
- Evaluation outcomes
- Score reports
- Resume data
"""

from interviewdesk.models.interview import (
    InterviewSession,
    SessionStatus,
    SessionSummary,
    AdvanceResult,
)
from interviewdesk.models.question import Question, Difficulty, DifficultyPolicy, NO_ANSWER
from interviewdesk.models.evaluation import EvaluationOutcome
from interviewdesk.models.report import ScoreBreakdown, DifficultyScore, ScoreTier
from interviewdesk.models.resume import ResumeData, ResumeMediaType

__all__ = [
    # Interview
    "InterviewSession",
    "SessionStatus",
    "SessionSummary",
    "AdvanceResult",
    # Question
    "Question",
    "Difficulty",
    "DifficultyPolicy",
    "NO_ANSWER",
    # Evaluation
    "EvaluationOutcome",
    # Report
    "ScoreBreakdown",
    "DifficultyScore",
    "ScoreTier",
    # Resume
    "ResumeData",
    "ResumeMediaType",
]
