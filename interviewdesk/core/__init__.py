"""
Core business logic modules for InterviewDesk

Contains:
- Session State Machine: lifecycle, countdown and answer flow for one session
- Interview Orchestrator: per-session actor tying the components together
- Question Bank: difficulty-ordered question set generation
- Evaluator: answer scoring contract and heuristic implementation
- Aggregator: final score and summary
- Session Store: persistence contract and in-memory store
- Resume Parser: PDF/DOCX text and contact extraction
"""

from interviewdesk.core.session_machine import SessionStateMachine
from interviewdesk.core.interview_orchestrator import InterviewOrchestrator
from interviewdesk.core.question_bank import QuestionBank
from interviewdesk.core.evaluator import Evaluator, HeuristicEvaluator
from interviewdesk.core.aggregator import aggregate
from interviewdesk.core.session_store import SessionStore, InMemorySessionStore
from interviewdesk.core.resume_parser import ResumeParser

__all__ = [
    "SessionStateMachine",
    "InterviewOrchestrator",
    "QuestionBank",
    "Evaluator",
    "HeuristicEvaluator",
    "aggregate",
    "SessionStore",
    "InMemorySessionStore",
    "ResumeParser",
]
