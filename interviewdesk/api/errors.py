"""
API error mapping

Translates engine errors into JSON error responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from interviewdesk.core.errors import (
    AlreadyAnswered,
    ConfigurationError,
    EvaluationFailed,
    FileTooLarge,
    IncompleteScoring,
    InterviewError,
    InvalidState,
    InvalidTransition,
    ParseFailure,
    SessionNotFound,
    UnsupportedFormat,
)

logger = logging.getLogger(__name__)


STATUS_CODES: dict[type[InterviewError], int] = {
    SessionNotFound: 404,
    InvalidTransition: 409,
    InvalidState: 409,
    AlreadyAnswered: 409,
    IncompleteScoring: 409,
    ConfigurationError: 422,
    EvaluationFailed: 502,
    UnsupportedFormat: 415,
    FileTooLarge: 413,
    ParseFailure: 422,
}


def status_code_for(error: InterviewError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return 400


async def interview_error_handler(request: Request, exc: InterviewError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "detail": exc.message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the engine error handler to an application."""
    app.add_exception_handler(InterviewError, interview_error_handler)
