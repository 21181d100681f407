"""
Error taxonomy for InterviewDesk.

Every error raised by the engine derives from InterviewError and carries a
stable ``code`` the API layer uses in its error bodies.
"""


class InterviewError(Exception):
    """Base class for all interview engine errors."""

    code = "interview_error"

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class ConfigurationError(InterviewError):
    """Malformed question generation request."""

    code = "configuration_error"


class InvalidTransition(InterviewError):
    """Lifecycle transition not permitted from the current status."""

    code = "invalid_transition"


class InvalidState(InterviewError):
    """Operation not permitted for the current question."""

    code = "invalid_state"


class AlreadyAnswered(InterviewError):
    """The current question already has an answer."""

    code = "already_answered"


class EvaluationFailed(InterviewError):
    """The evaluator failed or timed out. Safe to retry."""

    code = "evaluation_failed"


class IncompleteScoring(InterviewError):
    """Aggregation requested before every question was scored."""

    code = "incomplete_scoring"


class SessionNotFound(InterviewError):
    """No session stored under the requested id."""

    code = "session_not_found"


class ResumeError(InterviewError):
    """Base class for resume extraction errors."""

    code = "resume_error"


class UnsupportedFormat(ResumeError):
    """Please upload a PDF or DOCX file only."""

    code = "unsupported_format"


class FileTooLarge(ResumeError):
    """File size must be less than 10MB."""

    code = "file_too_large"


class ParseFailure(ResumeError):
    """Failed to parse the file. Please make sure it is not corrupted."""

    code = "parse_failure"
