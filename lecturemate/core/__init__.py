# Core infrastructure
from lecturemate.core.context import (
    LogContext,
    clear_context,
    get_context,
    get_session_id,
)
from lecturemate.core.errors import (
    AccessDeniedError,
    CourseNotFoundError,
    LearningEngineError,
    LectureNotFoundError,
    NetworkFailureError,
    NotAuthenticatedError,
    PaymentRequiredError,
)
from lecturemate.core.logging import configure_structlog, get_logger


__all__ = [
    "AccessDeniedError",
    "CourseNotFoundError",
    "LearningEngineError",
    "LectureNotFoundError",
    "LogContext",
    "NetworkFailureError",
    "NotAuthenticatedError",
    "PaymentRequiredError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_session_id",
]
