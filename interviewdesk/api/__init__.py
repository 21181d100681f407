"""
API layer for InterviewDesk

Contains FastAPI routers for:
- Interview session management
- Report retrieval
- Reference metadata
"""

from interviewdesk.api.router import api_router

__all__ = ["api_router"]
