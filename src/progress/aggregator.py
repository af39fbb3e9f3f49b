"""Progress aggregation.

Combines the course index (lesson counts) with lesson completion rows into
per-course, per-section and per-learner figures. Only completion rows for
lessons currently in a course are counted, so removed lessons never
inflate progress.
"""

import asyncio
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog

from src.core.exceptions import CourseNotFoundError
from src.courses.models import CourseIndex
from src.courses.service import CourseHierarchyService
from src.progress.models import (
    CourseProgress,
    Enrollment,
    LearnerStats,
    SectionProgress,
)
from src.progress.repository import EnrollmentRepository, LessonProgressRepository


logger = structlog.get_logger(__name__)


class ProgressAggregator:
    """Computes course progress and learner stats on read."""

    def __init__(
        self,
        hierarchy: CourseHierarchyService,
        progress_repository: LessonProgressRepository,
        enrollment_repository: EnrollmentRepository,
    ):
        self.hierarchy = hierarchy
        self.progress_repository = progress_repository
        self.enrollment_repository = enrollment_repository

    async def _completed_ids(self, user_id: UUID, index: CourseIndex) -> set[UUID]:
        rows = await self.progress_repository.find_many(user_id, index.lesson_ids)
        return {row.lesson_id for row in rows if row.completed}

    async def course_progress(self, user_id: UUID, course_id: UUID) -> CourseProgress:
        """Get completion of one course.

        Raises:
            CourseNotFoundError: If the course does not exist
        """
        index = await self.hierarchy.build_index(course_id)
        completed = await self._completed_ids(user_id, index)
        return CourseProgress(
            course_id=course_id,
            total_lessons=index.total_lesson_count,
            completed_lessons=len(completed),
        )

    async def course_progress_detail(
        self, user_id: UUID, course_id: UUID
    ) -> tuple[CourseProgress, list[SectionProgress], set[UUID]]:
        """Get course completion with a per-section breakdown.

        Returns:
            Tuple of (course progress, section progress in order, completed lesson ids)
        """
        index = await self.hierarchy.build_index(course_id)
        completed = await self._completed_ids(user_id, index)

        sections = []
        for section in index.sections:
            lessons = index.lessons_by_section.get(section.id, [])
            sections.append(
                SectionProgress(
                    section_id=section.id,
                    title=section.title,
                    total_lessons=len(lessons),
                    completed_lessons=sum(1 for lesson in lessons if lesson.id in completed),
                )
            )

        course = CourseProgress(
            course_id=course_id,
            total_lessons=index.total_lesson_count,
            completed_lessons=len(completed),
        )
        return course, sections, completed

    async def _progress_or_empty(self, user_id: UUID, course_id: UUID) -> CourseProgress:
        # An enrollment whose course is gone counts as a course with no lessons
        try:
            return await self.course_progress(user_id, course_id)
        except CourseNotFoundError:
            logger.warning(
                "enrollment_course_missing",
                user_id=str(user_id),
                course_id=str(course_id),
            )
            return CourseProgress(course_id=course_id, total_lessons=0, completed_lessons=0)

    async def enrollment_progress(
        self, user_id: UUID
    ) -> list[tuple[Enrollment, CourseProgress]]:
        """Get each active enrollment of a user with its course progress."""
        enrollments = [
            e
            for e in await self.enrollment_repository.list_user_enrollments(user_id)
            if e.is_active
        ]
        progress = await asyncio.gather(
            *(self._progress_or_empty(user_id, e.course_id) for e in enrollments)
        )
        return list(zip(enrollments, progress, strict=True))

    async def aggregate_stats(self, user_id: UUID) -> LearnerStats:
        """Summarize progress across all active enrollments.

        Courses with no lessons count toward ``total_courses`` only. The
        average is the mean of exact percentages, rounded half up at the end.
        """
        entries = await self.enrollment_progress(user_id)
        progresses = [progress for _, progress in entries]

        measurable = [p for p in progresses if p.total_lessons > 0]
        average = 0
        if measurable:
            mean = sum((p.exact_percentage for p in measurable), Decimal(0)) / len(
                measurable
            )
            average = int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))

        stats = LearnerStats(
            total_courses=len(progresses),
            completed_courses=sum(1 for p in progresses if p.is_completed),
            in_progress_courses=sum(1 for p in progresses if p.is_in_progress),
            average_progress=average,
        )
        logger.debug(
            "learner_stats_aggregated",
            user_id=str(user_id),
            total_courses=stats.total_courses,
            average_progress=stats.average_progress,
        )
        return stats
