"""Course hierarchy service layer.

Business logic for:
- Building the ordered Section -> Lesson index of a course
- Course and lesson lookups used by access control and progress
"""

import asyncio
from uuid import UUID

import structlog

from src.core.exceptions import CourseNotFoundError, LessonNotFoundError
from src.courses.models import Course, CourseIndex, Lesson, Section
from src.courses.repository import CourseRepository


logger = structlog.get_logger(__name__)


def _position_key(item: Section | Lesson) -> tuple[int, str]:
    # Ties on position are broken by id so the order is deterministic
    return (item.position, str(item.id))


class CourseHierarchyService:
    """Read-only view of the Course -> Section -> Lesson tree."""

    def __init__(self, repository: CourseRepository):
        self.repository = repository

    async def get_course(self, course_id: UUID) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If the course does not exist
        """
        course = await self.repository.get_course(course_id)
        if course is None:
            raise CourseNotFoundError
        return course

    async def get_lesson(self, lesson_id: UUID) -> Lesson:
        """Get lesson by ID.

        Raises:
            LessonNotFoundError: If the lesson does not exist
        """
        lesson = await self.repository.get_lesson(lesson_id)
        if lesson is None:
            raise LessonNotFoundError
        return lesson

    async def build_index(self, course_id: UUID) -> CourseIndex:
        """Build the ordered lesson index of a course.

        Sections are ordered by position, lessons by position within their
        section. A course with no sections yields an empty index.

        Raises:
            CourseNotFoundError: If the course does not exist
        """
        course = await self.get_course(course_id)

        sections = sorted(
            await self.repository.list_sections(course_id), key=_position_key
        )
        lesson_lists = await asyncio.gather(
            *(self.repository.list_lessons(section.id) for section in sections)
        )

        lessons_by_section = {
            section.id: sorted(lessons, key=_position_key)
            for section, lessons in zip(sections, lesson_lists, strict=True)
        }

        index = CourseIndex(course, sections, lessons_by_section)
        logger.debug(
            "course_index_built",
            course_id=str(course_id),
            sections=len(sections),
            lessons=index.total_lesson_count,
        )
        return index
