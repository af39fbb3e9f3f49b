"""Cassandra access for the course hierarchy (read side)."""

from uuid import UUID

from src.core.database.repository import CassandraRepository
from src.courses.models import Course, Lesson, Section


class CourseRepository(CassandraRepository):
    """Keyed reads over courses, sections and lessons."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_course_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._get_sections_by_course = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.sections_by_course WHERE course_id = ?"
        )
        self._get_lesson_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.lessons WHERE id = ?"
        )
        self._get_lessons_by_section = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.lessons_by_section WHERE section_id = ?"
        )

    async def get_course(self, course_id: UUID) -> Course | None:
        """Get course by ID."""
        result = await self._execute(self._get_course_by_id, [course_id])
        row = result.one()
        return Course.from_row(row) if row else None

    async def list_sections(self, course_id: UUID) -> list[Section]:
        """Get the sections of a course in clustering order."""
        rows = await self._execute(self._get_sections_by_course, [course_id])
        return [Section.from_row(row) for row in rows]

    async def get_lesson(self, lesson_id: UUID) -> Lesson | None:
        """Get lesson by ID."""
        result = await self._execute(self._get_lesson_by_id, [lesson_id])
        row = result.one()
        return Lesson.from_row(row) if row else None

    async def list_lessons(self, section_id: UUID) -> list[Lesson]:
        """Get the lessons of a section in clustering order."""
        rows = await self._execute(self._get_lessons_by_section, [section_id])
        return [Lesson.from_row(row) for row in rows]
