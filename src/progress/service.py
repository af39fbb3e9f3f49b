"""Learner progress service layer.

Business logic for:
- Manual lesson completion (toggle and explicit set)
- Course enrollment management

Every write requires an ``AccessDecision`` computed for the same user,
course and lesson; the resolver is the single authority on who may write.
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog

from src.access.models import AccessDecision
from src.core.exceptions import AccessDeniedError
from src.courses.service import CourseHierarchyService
from src.progress.models import Enrollment, EnrollmentStatus, LessonProgress
from src.progress.repository import EnrollmentRepository, LessonProgressRepository


logger = structlog.get_logger(__name__)


def _check_access(
    access: AccessDecision | None,
    user_id: UUID,
    course_id: UUID,
    lesson_id: UUID,
) -> None:
    """Raise ``AccessDeniedError`` unless the decision authorizes this write."""
    if access is None or not access.authorizes(user_id, course_id, lesson_id):
        logger.warning(
            "progress_write_denied",
            user_id=str(user_id),
            course_id=str(course_id),
            lesson_id=str(lesson_id),
            reason=access.reason.value if access else None,
        )
        raise AccessDeniedError


# ==============================================================================
# Lesson Completion Service
# ==============================================================================


class LessonCompletionService:
    """Service for lesson completion facts."""

    def __init__(
        self,
        repository: LessonProgressRepository,
        hierarchy: CourseHierarchyService,
    ):
        self.repository = repository
        self.hierarchy = hierarchy

    async def toggle_completion(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        access: AccessDecision | None,
    ) -> LessonProgress:
        """Flip the completion state of a lesson.

        No row yet means "not completed", so the first toggle completes it.

        Raises:
            AccessDeniedError: If ``access`` does not authorize this user/lesson
        """
        _check_access(access, user_id, course_id, lesson_id)

        existing = await self.repository.find_one(user_id, lesson_id)
        completed = True if existing is None else not existing.completed

        progress = await self._write(user_id, lesson_id, course_id, completed)
        logger.info(
            "lesson_completion_toggled",
            user_id=str(user_id),
            lesson_id=str(lesson_id),
            course_id=str(course_id),
            completed=completed,
        )
        return progress

    async def set_completion(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        completed: bool,
        access: AccessDecision | None,
    ) -> LessonProgress:
        """Set the completion state of a lesson (idempotent).

        Raises:
            AccessDeniedError: If ``access`` does not authorize this user/lesson
        """
        _check_access(access, user_id, course_id, lesson_id)

        progress = await self._write(user_id, lesson_id, course_id, completed)
        logger.info(
            "lesson_completion_set",
            user_id=str(user_id),
            lesson_id=str(lesson_id),
            course_id=str(course_id),
            completed=completed,
        )
        return progress

    async def get_lesson_progress(
        self, user_id: UUID, lesson_id: UUID
    ) -> LessonProgress | None:
        """Get the completion row of a lesson, if any."""
        return await self.repository.find_one(user_id, lesson_id)

    async def list_course_progress(
        self, user_id: UUID, course_id: UUID
    ) -> list[LessonProgress]:
        """Get the completion rows of a user for the lessons currently in a course."""
        index = await self.hierarchy.build_index(course_id)
        return await self.repository.find_many(user_id, index.lesson_ids)

    async def _write(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        completed: bool,
    ) -> LessonProgress:
        now = datetime.now(UTC)
        progress = LessonProgress(
            user_id=user_id,
            lesson_id=lesson_id,
            course_id=course_id,
            completed=completed,
            completed_at=now if completed else None,
            updated_at=now,
        )
        return await self.repository.upsert(progress)


# ==============================================================================
# Enrollment Service
# ==============================================================================


class EnrollmentService:
    """Service for course enrollments."""

    def __init__(
        self,
        repository: EnrollmentRepository,
        hierarchy: CourseHierarchyService,
    ):
        self.repository = repository
        self.hierarchy = hierarchy

    async def enroll_user(self, user_id: UUID, course_id: UUID) -> Enrollment:
        """Enroll user in a course.

        Raises:
            CourseNotFoundError: If the course does not exist
            AlreadyEnrolledError: If user already enrolled
        """
        await self.hierarchy.get_course(course_id)

        enrollment = Enrollment(
            course_id=course_id,
            user_id=user_id,
            status=EnrollmentStatus.ACTIVE.value,
        )
        await self.repository.create(enrollment)

        logger.info(
            "user_enrolled",
            user_id=str(user_id),
            course_id=str(course_id),
        )
        return enrollment
