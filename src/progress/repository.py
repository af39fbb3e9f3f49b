"""Cassandra access for enrollments and lesson progress."""

from collections.abc import Sequence
from uuid import UUID

import structlog

from src.core.database.repository import CassandraRepository
from src.core.exceptions import AlreadyEnrolledError
from src.progress.models import Enrollment, LessonProgress


logger = structlog.get_logger(__name__)


class EnrollmentRepository(CassandraRepository):
    """Enrollments, dual-written by course and by user."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_enrollment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.enrollments
            WHERE course_id = ? AND user_id = ?
        """)

        # LWT: only one enrollment per (course_id, user_id)
        self._insert_enrollment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.enrollments
            (course_id, user_id, status, enrolled_at)
            VALUES (?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._insert_enrollment_by_user = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.enrollments_by_user
            (user_id, course_id, status, enrolled_at)
            VALUES (?, ?, ?, ?)
        """)

        self._get_user_enrollments = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.enrollments_by_user
            WHERE user_id = ?
        """)

    async def get_enrollment(self, user_id: UUID, course_id: UUID) -> Enrollment | None:
        """Get enrollment by user and course."""
        result = await self._execute(self._get_enrollment, [course_id, user_id])
        row = result.one()
        return Enrollment.from_row(row) if row else None

    async def list_user_enrollments(self, user_id: UUID) -> list[Enrollment]:
        """Get all enrollments for a user (lookup table)."""
        rows = await self._execute(self._get_user_enrollments, [user_id])
        return [Enrollment.from_row(row) for row in rows]

    async def create(self, enrollment: Enrollment) -> Enrollment:
        """Insert a new enrollment.

        Raises:
            AlreadyEnrolledError: If (course_id, user_id) already exists
        """
        result = await self._execute(
            self._insert_enrollment,
            [
                enrollment.course_id,
                enrollment.user_id,
                enrollment.status,
                enrollment.enrolled_at,
            ],
        )
        if not result.was_applied:
            logger.info(
                "enrollment_already_exists",
                user_id=str(enrollment.user_id),
                course_id=str(enrollment.course_id),
            )
            raise AlreadyEnrolledError

        await self._execute(
            self._insert_enrollment_by_user,
            [
                enrollment.user_id,
                enrollment.course_id,
                enrollment.status,
                enrollment.enrolled_at,
            ],
        )
        return enrollment


class LessonProgressRepository(CassandraRepository):
    """Lesson completion rows keyed by (user_id, lesson_id)."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_lesson_progress = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.lesson_progress
            WHERE user_id = ? AND lesson_id = ?
        """)

        self._get_lessons_progress = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.lesson_progress
            WHERE user_id = ? AND lesson_id IN ?
        """)

        self._upsert_lesson_progress = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.lesson_progress
            (user_id, lesson_id, course_id, completed, completed_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

    async def find_one(self, user_id: UUID, lesson_id: UUID) -> LessonProgress | None:
        """Get the progress row for (user_id, lesson_id)."""
        result = await self._execute(self._get_lesson_progress, [user_id, lesson_id])
        row = result.one()
        return LessonProgress.from_row(row) if row else None

    async def find_many(
        self, user_id: UUID, lesson_ids: Sequence[UUID]
    ) -> list[LessonProgress]:
        """Get the progress rows of a user for the given lessons."""
        if not lesson_ids:
            return []
        rows = await self._execute(self._get_lessons_progress, [user_id, list(lesson_ids)])
        return [LessonProgress.from_row(row) for row in rows]

    async def upsert(self, progress: LessonProgress) -> LessonProgress:
        """Write the row for (user_id, lesson_id), replacing any existing one."""
        await self._execute(
            self._upsert_lesson_progress,
            [
                progress.user_id,
                progress.lesson_id,
                progress.course_id,
                progress.completed,
                progress.completed_at,
                progress.updated_at,
            ],
        )
        return progress
