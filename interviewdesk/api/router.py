"""
Main API router for InterviewDesk

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from interviewdesk.api.endpoints import interview, report, metadata

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/sessions",
    tags=["Sessions"]
)

api_router.include_router(
    report.router,
    prefix="/report",
    tags=["Report"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)
