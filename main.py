"""
InterviewDesk - Timed Technical Screening Interviews

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interviewdesk.config.settings import get_settings
from interviewdesk.api.router import api_router
from interviewdesk.api.dependencies import cleanup
from interviewdesk.api.errors import register_error_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting InterviewDesk...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")

    yield

    # Shutdown
    logger.info("Shutting down InterviewDesk...")
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title="InterviewDesk",
    description="Timed, multi-stage technical screening interviews",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Map engine errors to JSON responses
register_error_handlers(app)

# Mount API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
