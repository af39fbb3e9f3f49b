"""Pydantic schemas for the course hierarchy.

Response models for the ordered Section -> Lesson index.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from src.courses.models import CourseIndex, Lesson, Section


class LessonSummary(BaseModel):
    """Lesson entry of the course index (no content locations)."""

    id: UUID
    title: str
    position: int
    content_type: str
    is_preview_free: bool

    @classmethod
    def from_entity(cls, lesson: Lesson) -> "LessonSummary":
        """Create response from entity."""
        return cls(
            id=lesson.id,
            title=lesson.title,
            position=lesson.position,
            content_type=lesson.content_type,
            is_preview_free=lesson.is_preview_free,
        )


class SectionResponse(BaseModel):
    """Section with its ordered lessons."""

    id: UUID
    title: str
    position: int
    lessons: list[LessonSummary] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, section: Section, lessons: list[Lesson]) -> "SectionResponse":
        """Create response from entity."""
        return cls(
            id=section.id,
            title=section.title,
            position=section.position,
            lessons=[LessonSummary.from_entity(lesson) for lesson in lessons],
        )


class CourseIndexResponse(BaseModel):
    """Ordered course index."""

    course_id: UUID
    title: str
    status: str
    instructor_id: UUID | None = None
    total_lessons: int
    sections: list[SectionResponse]

    @classmethod
    def from_index(cls, index: CourseIndex) -> "CourseIndexResponse":
        """Create response from a built index."""
        return cls(
            course_id=index.course.id,
            title=index.course.title,
            status=index.course.status,
            instructor_id=index.course.instructor_id,
            total_lessons=index.total_lesson_count,
            sections=[
                SectionResponse.from_entity(
                    section, index.lessons_by_section.get(section.id, [])
                )
                for section in index.sections
            ],
        )
