"""FastAPI dependencies for progress tracking.

Provides dependency injection for:
- Lesson completion service
- Enrollment service
- Progress aggregator
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .aggregator import ProgressAggregator
from .service import EnrollmentService, LessonCompletionService


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Servico de progresso nao disponivel",
        )
    return service


async def get_completion_service(request: Request) -> LessonCompletionService:
    """Get lesson completion service from app state."""
    return _from_state(request, "completion_service")


async def get_enrollment_service(request: Request) -> EnrollmentService:
    """Get enrollment service from app state."""
    return _from_state(request, "enrollment_service")


async def get_progress_aggregator(request: Request) -> ProgressAggregator:
    """Get progress aggregator from app state."""
    return _from_state(request, "progress_aggregator")


CompletionServiceDep = Annotated[LessonCompletionService, Depends(get_completion_service)]
EnrollmentServiceDep = Annotated[EnrollmentService, Depends(get_enrollment_service)]
ProgressAggregatorDep = Annotated[ProgressAggregator, Depends(get_progress_aggregator)]
