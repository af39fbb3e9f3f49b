"""Enrollment-based access resolution.

Rules, first match wins:
1. Free preview lesson of a published course
2. Course owner (instructor)
3. Active enrollment
4. Denied
"""

from uuid import UUID

import structlog

from src.access.models import AccessDecision, AccessReason
from src.core.exceptions import AccessDeniedError, LessonNotFoundError
from src.courses.service import CourseHierarchyService
from src.progress.repository import EnrollmentRepository


logger = structlog.get_logger(__name__)


class AccessResolver:
    """Decides whether a caller may view a course or lesson."""

    def __init__(self, hierarchy: CourseHierarchyService, enrollments: EnrollmentRepository):
        self.hierarchy = hierarchy
        self.enrollments = enrollments

    async def resolve_access(
        self,
        user_id: UUID | None,
        course_id: UUID,
        lesson_id: UUID | None = None,
    ) -> AccessDecision:
        """Resolve access for an optional user.

        Denial is returned as a decision, never raised.

        Raises:
            CourseNotFoundError: If the course does not exist
            LessonNotFoundError: If the lesson does not exist or is not in the course
        """
        course = await self.hierarchy.get_course(course_id)

        lesson = None
        if lesson_id is not None:
            lesson = await self.hierarchy.get_lesson(lesson_id)
            if lesson.course_id != course_id:
                raise LessonNotFoundError

        reason = AccessReason.DENIED
        if lesson is not None and lesson.is_preview_free and course.is_published:
            reason = AccessReason.FREE_PREVIEW
        elif user_id is not None:
            if course.instructor_id == user_id:
                reason = AccessReason.OWNER
            else:
                enrollment = await self.enrollments.get_enrollment(user_id, course_id)
                if enrollment is not None and enrollment.is_active:
                    reason = AccessReason.ENROLLED

        logger.debug(
            "access_resolved",
            user_id=str(user_id) if user_id else None,
            course_id=str(course_id),
            lesson_id=str(lesson_id) if lesson_id else None,
            reason=reason.value,
        )
        return AccessDecision(user_id, course_id, reason, lesson_id=lesson_id)

    async def require_access(
        self,
        user_id: UUID | None,
        course_id: UUID,
        lesson_id: UUID | None = None,
    ) -> AccessDecision:
        """Resolve access and raise ``AccessDeniedError`` when denied."""
        decision = await self.resolve_access(user_id, course_id, lesson_id)
        if not decision.granted:
            raise AccessDeniedError
        return decision
