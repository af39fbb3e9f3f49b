"""Learner progress API endpoints.

Provides routes for:
- Manual lesson completion (toggle and set)
- Course progress and learner stats
- Course enrollment (checkout integration) and listing
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.access.dependencies import AccessResolverDep, require_lesson_access
from src.auth.dependencies import CurrentUser, MasterApiKey
from src.core.errors import handle_engine_error
from src.core.exceptions import EngineError

from .dependencies import (
    CompletionServiceDep,
    EnrollmentServiceDep,
    ProgressAggregatorDep,
)
from .schemas import (
    CourseProgressResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
    LearnerStatsResponse,
    LessonProgressResponse,
    SetCompletionRequest,
)


router = APIRouter(prefix="/v1/progress", tags=["progress"])
enrollments_router = APIRouter(prefix="/v1/enrollments", tags=["enrollments"])


# ==============================================================================
# Lesson Completion Endpoints
# ==============================================================================


@router.post(
    "/lessons/{lesson_id}/toggle",
    response_model=LessonProgressResponse,
    summary="Toggle lesson completion",
)
async def toggle_lesson_completion(
    lesson_id: UUID,
    completion_service: CompletionServiceDep,
    resolver: AccessResolverDep,
    user: CurrentUser,
) -> LessonProgressResponse:
    """Flip the completion state of a lesson. Requires access to the lesson."""
    lesson, decision = await require_lesson_access(resolver, user, lesson_id)

    try:
        progress = await completion_service.toggle_completion(
            user_id=user.id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            access=decision,
        )
    except EngineError as e:
        raise handle_engine_error(e) from e
    return LessonProgressResponse.from_entity(progress)


@router.put(
    "/lessons/{lesson_id}",
    response_model=LessonProgressResponse,
    summary="Set lesson completion",
)
async def set_lesson_completion(
    lesson_id: UUID,
    data: SetCompletionRequest,
    completion_service: CompletionServiceDep,
    resolver: AccessResolverDep,
    user: CurrentUser,
) -> LessonProgressResponse:
    """Set the completion state of a lesson (idempotent)."""
    lesson, decision = await require_lesson_access(resolver, user, lesson_id)

    try:
        progress = await completion_service.set_completion(
            user_id=user.id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            completed=data.completed,
            access=decision,
        )
    except EngineError as e:
        raise handle_engine_error(e) from e
    return LessonProgressResponse.from_entity(progress)


# ==============================================================================
# Progress Query Endpoints
# ==============================================================================


@router.get(
    "/courses/{course_id}",
    response_model=CourseProgressResponse,
    summary="Get course progress",
)
async def get_course_progress(
    course_id: UUID,
    aggregator: ProgressAggregatorDep,
    user: CurrentUser,
) -> CourseProgressResponse:
    """Get the caller's progress in a course, with a per-section breakdown."""
    try:
        progress, sections, completed = await aggregator.course_progress_detail(
            user.id, course_id
        )
    except EngineError as e:
        raise handle_engine_error(e) from e
    return CourseProgressResponse.from_entity(progress, sections, completed)


@router.get(
    "/me/stats",
    response_model=LearnerStatsResponse,
    summary="Get learner stats",
)
async def get_my_stats(
    aggregator: ProgressAggregatorDep,
    user: CurrentUser,
) -> LearnerStatsResponse:
    """Summarize the caller's progress across all active enrollments."""
    try:
        stats = await aggregator.aggregate_stats(user.id)
    except EngineError as e:
        raise handle_engine_error(e) from e
    return LearnerStatsResponse.from_entity(stats)


# ==============================================================================
# Enrollment Endpoints
# ==============================================================================


@enrollments_router.post(
    "",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll user in course",
)
async def enroll(
    data: EnrollRequest,
    enrollment_service: EnrollmentServiceDep,
    _api_key: MasterApiKey,
) -> EnrollmentResponse:
    """Create an ACTIVE enrollment (called by checkout after payment)."""
    try:
        enrollment = await enrollment_service.enroll_user(data.user_id, data.course_id)
    except EngineError as e:
        raise handle_engine_error(e) from e
    return EnrollmentResponse.from_entity(enrollment)


@enrollments_router.get(
    "/my",
    response_model=EnrollmentListResponse,
    summary="List my enrollments",
)
async def list_my_enrollments(
    aggregator: ProgressAggregatorDep,
    user: CurrentUser,
) -> EnrollmentListResponse:
    """List the caller's active enrollments with course progress."""
    try:
        entries = await aggregator.enrollment_progress(user.id)
    except EngineError as e:
        raise handle_engine_error(e) from e

    items = [
        EnrollmentResponse.from_entity(enrollment, progress)
        for enrollment, progress in entries
    ]
    return EnrollmentListResponse(items=items, total=len(items))
