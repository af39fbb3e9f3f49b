"""Database models for learner progress tracking.

Cassandra table definitions for:
- Lesson progress: Completion flag per (user, lesson)
- Enrollments: Course enrollment, partitioned by course
- Lookup tables: Enrollments partitioned by user

Architecture: Dual-write pattern for enrollments so they can be queried
from both the course_id and the user_id perspective. The primary keys are
the uniqueness keys, so an INSERT with an existing key is an upsert.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from src.courses.models import ensure_utc_aware


class EnrollmentStatus(str, Enum):
    """Course enrollment status."""

    ACTIVE = "active"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# Progresso de aula por usuario
# Partition key: user_id; clustering: lesson_id (uma linha por usuario/aula)
LESSON_PROGRESS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lesson_progress (
    user_id UUID,
    lesson_id UUID,
    course_id UUID,
    completed BOOLEAN,
    completed_at TIMESTAMP,
    updated_at TIMESTAMP,
    PRIMARY KEY ((user_id), lesson_id)
)
"""

# Inscricoes em cursos - particionado por course_id
# Para queries: "quantos alunos tem neste curso?"
ENROLLMENTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments (
    course_id UUID,
    user_id UUID,
    status TEXT,
    enrolled_at TIMESTAMP,
    PRIMARY KEY ((course_id), user_id)
)
"""

# Lookup: cursos por usuario - particionado por user_id
# Para queries: "quais cursos o usuario esta inscrito?"
ENROLLMENTS_BY_USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments_by_user (
    user_id UUID,
    course_id UUID,
    status TEXT,
    enrolled_at TIMESTAMP,
    PRIMARY KEY ((user_id), course_id)
)
"""

PROGRESS_TABLES_CQL = [
    LESSON_PROGRESS_TABLE_CQL,
    ENROLLMENTS_TABLE_CQL,
    ENROLLMENTS_BY_USER_TABLE_CQL,
]


# ==============================================================================
# Helper Functions
# ==============================================================================


def calculate_percentage(completed: int, total: int) -> int:
    """Completed share of total as an integer percentage.

    Rounds half up (2/3 -> 67, 1/8 -> 13). Returns 0 when total is 0.
    """
    if total <= 0:
        return 0
    exact = Decimal(completed) * 100 / Decimal(total)
    return int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP))


# ==============================================================================
# Entity Classes
# ==============================================================================


class LessonProgress:
    """Lesson completion fact for one user.

    Attributes:
        user_id: Learner
        lesson_id: Lesson
        course_id: Course of the lesson
        completed: Completion flag
        completed_at: Set iff completed
        updated_at: Last write timestamp
    """

    def __init__(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        completed: bool = False,
        completed_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.user_id = user_id
        self.lesson_id = lesson_id
        self.course_id = course_id
        self.completed = completed
        self.completed_at = ensure_utc_aware(completed_at) if completed else None
        self.updated_at = ensure_utc_aware(updated_at) or datetime.now(UTC)

    @classmethod
    def from_row(cls, row: Any) -> "LessonProgress":
        """Create LessonProgress instance from Cassandra row."""
        return cls(
            user_id=row.user_id,
            lesson_id=row.lesson_id,
            course_id=row.course_id,
            completed=bool(row.completed),
            completed_at=row.completed_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        return f"<LessonProgress user={self.user_id} lesson={self.lesson_id} completed={self.completed}>"


class Enrollment:
    """Course enrollment (entitlement granting access to a course)."""

    def __init__(
        self,
        course_id: UUID,
        user_id: UUID,
        status: str = EnrollmentStatus.ACTIVE.value,
        enrolled_at: datetime | None = None,
    ):
        self.course_id = course_id
        self.user_id = user_id
        self.status = status
        self.enrolled_at = ensure_utc_aware(enrolled_at) or datetime.now(UTC)

    @property
    def is_active(self) -> bool:
        """Check if enrollment grants access."""
        return self.status == EnrollmentStatus.ACTIVE.value

    @classmethod
    def from_row(cls, row: Any) -> "Enrollment":
        """Create Enrollment instance from either enrollment table row."""
        return cls(
            course_id=row.course_id,
            user_id=row.user_id,
            status=row.status or EnrollmentStatus.ACTIVE.value,
            enrolled_at=row.enrolled_at,
        )

    def __repr__(self) -> str:
        return f"<Enrollment user={self.user_id} course={self.course_id} ({self.status})>"


# ==============================================================================
# Aggregates (computed, not stored)
# ==============================================================================


class CourseProgress:
    """Completion of one course by one user."""

    def __init__(self, course_id: UUID, total_lessons: int, completed_lessons: int):
        self.course_id = course_id
        self.total_lessons = total_lessons
        self.completed_lessons = completed_lessons

    @property
    def percentage(self) -> int:
        return calculate_percentage(self.completed_lessons, self.total_lessons)

    @property
    def exact_percentage(self) -> Decimal:
        """Unrounded percentage, used for averaging."""
        if self.total_lessons <= 0:
            return Decimal(0)
        return Decimal(self.completed_lessons) * 100 / Decimal(self.total_lessons)

    @property
    def is_completed(self) -> bool:
        return self.total_lessons > 0 and self.completed_lessons == self.total_lessons

    @property
    def is_in_progress(self) -> bool:
        return 0 < self.completed_lessons < self.total_lessons

    def __repr__(self) -> str:
        return (
            f"<CourseProgress course={self.course_id} "
            f"{self.completed_lessons}/{self.total_lessons} ({self.percentage}%)>"
        )


class SectionProgress:
    """Completion of one section by one user."""

    def __init__(
        self,
        section_id: UUID,
        title: str,
        total_lessons: int,
        completed_lessons: int,
    ):
        self.section_id = section_id
        self.title = title
        self.total_lessons = total_lessons
        self.completed_lessons = completed_lessons

    @property
    def percentage(self) -> int:
        return calculate_percentage(self.completed_lessons, self.total_lessons)


class LearnerStats:
    """Progress summary across all of a user's active enrollments."""

    def __init__(
        self,
        total_courses: int = 0,
        completed_courses: int = 0,
        in_progress_courses: int = 0,
        average_progress: int = 0,
    ):
        self.total_courses = total_courses
        self.completed_courses = completed_courses
        self.in_progress_courses = in_progress_courses
        self.average_progress = average_progress

    def __repr__(self) -> str:
        return (
            f"<LearnerStats courses={self.total_courses} "
            f"completed={self.completed_courses} avg={self.average_progress}%>"
        )
