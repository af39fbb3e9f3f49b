"""HTTP mapping for engine errors."""

from fastapi import HTTPException, status

from src.core.exceptions import EngineError


ERROR_STATUS_MAP: dict[str, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "course_not_found": status.HTTP_404_NOT_FOUND,
    "lesson_not_found": status.HTTP_404_NOT_FOUND,
    "access_denied": status.HTTP_403_FORBIDDEN,
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "already_enrolled": status.HTTP_409_CONFLICT,
    "store_error": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def handle_engine_error(error: EngineError) -> HTTPException:
    """Convert an engine error to an HTTPException.

    Args:
        error: Engine error

    Returns:
        HTTPException with the status mapped from ``error.code``
    """
    return HTTPException(
        status_code=ERROR_STATUS_MAP.get(
            error.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail=error.message,
    )
