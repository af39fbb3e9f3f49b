"""Database models for the course hierarchy.

Cassandra table definitions for:
- Courses: Main course table (owner and publication status)
- Sections: Ordered sections per course
- Lessons: Lesson lookup by id, plus ordered lessons per section

The hierarchy is a strict tree: a lesson belongs to exactly one section,
a section to exactly one course. Lesson rows carry ``course_id`` so a lesson
can be resolved to its course without walking the sections.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class ContentStatus(str, Enum):
    """Course publication status."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ContentType(str, Enum):
    """Lesson content type."""

    VIDEO = "video"  # Upload privado, servido por URL assinada
    YOUTUBE = "youtube"
    TEXT = "text"
    QUIZ = "quiz"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id UUID PRIMARY KEY,
    title TEXT,
    instructor_id UUID,
    status TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Secoes de um curso, ordenadas por posicao
SECTIONS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.sections_by_course (
    course_id UUID,
    position INT,
    id UUID,
    title TEXT,
    PRIMARY KEY ((course_id), position, id)
) WITH CLUSTERING ORDER BY (position ASC, id ASC)
"""

LESSON_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons (
    id UUID PRIMARY KEY,
    section_id UUID,
    course_id UUID,
    position INT,
    title TEXT,
    content_type TEXT,
    is_preview_free BOOLEAN,
    video_path TEXT
)
"""

# Aulas de uma secao, ordenadas por posicao (desnormalizado)
LESSONS_BY_SECTION_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.lessons_by_section (
    section_id UUID,
    position INT,
    id UUID,
    course_id UUID,
    title TEXT,
    content_type TEXT,
    is_preview_free BOOLEAN,
    video_path TEXT,
    PRIMARY KEY ((section_id), position, id)
) WITH CLUSTERING ORDER BY (position ASC, id ASC)
"""

COURSES_TABLES_CQL = [
    COURSE_TABLE_CQL,
    SECTIONS_BY_COURSE_TABLE_CQL,
    LESSON_TABLE_CQL,
    LESSONS_BY_SECTION_TABLE_CQL,
]


# ==============================================================================
# Helper Functions
# ==============================================================================


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# ==============================================================================
# Entity Classes
# ==============================================================================


class Course:
    """Course entity.

    Attributes:
        id: Unique identifier (UUID)
        title: Course title
        instructor_id: User who authored the course (the owner)
        status: Publication status (draft, published)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: UUID | None = None,
        title: str = "",
        instructor_id: UUID | None = None,
        status: str = ContentStatus.DRAFT.value,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.title = title.strip()
        self.instructor_id = instructor_id
        self.status = status
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @property
    def is_published(self) -> bool:
        """Check if course is published."""
        return self.status == ContentStatus.PUBLISHED.value

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course instance from Cassandra row."""
        return cls(
            id=row.id,
            title=row.title or "",
            instructor_id=row.instructor_id,
            status=row.status or ContentStatus.DRAFT.value,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def __repr__(self) -> str:
        return f"<Course {self.title} ({self.status})>"


class Section:
    """Section entity, an ordered group of lessons inside one course."""

    def __init__(
        self,
        course_id: UUID,
        position: int,
        id: UUID | None = None,
        title: str = "",
    ):
        self.id = id or uuid4()
        self.course_id = course_id
        self.position = position
        self.title = title

    @classmethod
    def from_row(cls, row: Any) -> "Section":
        """Create Section instance from Cassandra row."""
        return cls(
            id=row.id,
            course_id=row.course_id,
            position=row.position,
            title=row.title or "",
        )

    def __repr__(self) -> str:
        return f"<Section {self.title} course={self.course_id} pos={self.position}>"


class Lesson:
    """Lesson entity.

    Attributes:
        id: Unique identifier (UUID)
        section_id: Owning section
        course_id: Course of the owning section
        position: Order within the section
        title: Lesson title
        content_type: Type of content (video, youtube, text, quiz)
        is_preview_free: Viewable without enrollment when the course is published
        video_path: Object path of the uploaded video (VIDEO lessons only)
    """

    def __init__(
        self,
        section_id: UUID,
        course_id: UUID,
        position: int,
        id: UUID | None = None,
        title: str = "",
        content_type: str = ContentType.VIDEO.value,
        is_preview_free: bool = False,
        video_path: str | None = None,
    ):
        self.id = id or uuid4()
        self.section_id = section_id
        self.course_id = course_id
        self.position = position
        self.title = title
        self.content_type = content_type
        self.is_preview_free = is_preview_free
        self.video_path = video_path

    @classmethod
    def from_row(cls, row: Any) -> "Lesson":
        """Create Lesson instance from a ``lessons`` or ``lessons_by_section`` row."""
        return cls(
            id=row.id,
            section_id=row.section_id,
            course_id=row.course_id,
            position=row.position,
            title=row.title or "",
            content_type=row.content_type or ContentType.VIDEO.value,
            is_preview_free=bool(row.is_preview_free),
            video_path=row.video_path,
        )

    def __repr__(self) -> str:
        return f"<Lesson {self.title} ({self.content_type}) pos={self.position}>"


class CourseIndex:
    """Ordered Section -> Lesson projection of one course.

    Built by ``CourseHierarchyService.build_index``; immutable once built.
    """

    def __init__(
        self,
        course: Course,
        sections: list[Section],
        lessons_by_section: dict[UUID, list[Lesson]],
    ):
        self.course = course
        self.sections = sections
        self.lessons_by_section = lessons_by_section

    @property
    def total_lesson_count(self) -> int:
        """Total number of lessons across all sections."""
        return sum(len(lessons) for lessons in self.lessons_by_section.values())

    def ordered_lessons(self) -> list[Lesson]:
        """All lessons in reading order (section order, then lesson order)."""
        return [
            lesson
            for section in self.sections
            for lesson in self.lessons_by_section.get(section.id, [])
        ]

    @property
    def lesson_ids(self) -> list[UUID]:
        """Lesson ids in reading order."""
        return [lesson.id for lesson in self.ordered_lessons()]

    def __repr__(self) -> str:
        return (
            f"<CourseIndex course={self.course.id} sections={len(self.sections)} "
            f"lessons={self.total_lesson_count}>"
        )
