# Core infrastructure
from src.core.context import (
    clear_context,
    get_context,
    get_request_id,
    get_trace_id,
    get_user_id,
    set_request_id,
    set_trace_id,
    set_user_id,
)
from src.core.exceptions import (
    AccessDeniedError,
    AlreadyEnrolledError,
    CourseNotFoundError,
    EngineError,
    LessonNotFoundError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from src.core.logging import configure_structlog, get_logger
from src.core.middleware import RequestContextMiddleware


__all__ = [
    "AccessDeniedError",
    "AlreadyEnrolledError",
    "CourseNotFoundError",
    "EngineError",
    "LessonNotFoundError",
    "NotFoundError",
    "RequestContextMiddleware",
    "StoreError",
    "ValidationError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_trace_id",
    "get_user_id",
    "set_request_id",
    "set_trace_id",
    "set_user_id",
]
