"""Pydantic schemas for learner progress tracking.

Request and response models for:
- Lesson completion (toggle and explicit set)
- Course enrollment
- Progress queries
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .models import (
    CourseProgress,
    Enrollment,
    LearnerStats,
    LessonProgress,
    SectionProgress,
)


# ==============================================================================
# Lesson Completion Schemas
# ==============================================================================


class SetCompletionRequest(BaseModel):
    """Request to set the completion state of a lesson."""

    completed: bool = Field(..., description="Desired completion state")


class LessonProgressResponse(BaseModel):
    """Lesson progress response."""

    lesson_id: UUID
    course_id: UUID
    completed: bool
    completed_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, entity: LessonProgress) -> "LessonProgressResponse":
        """Create response from entity."""
        return cls(
            lesson_id=entity.lesson_id,
            course_id=entity.course_id,
            completed=entity.completed,
            completed_at=entity.completed_at,
            updated_at=entity.updated_at,
        )


# ==============================================================================
# Progress Query Schemas
# ==============================================================================


class SectionProgressResponse(BaseModel):
    """Section progress summary."""

    section_id: UUID
    title: str
    total_lessons: int
    completed_lessons: int
    percentage: int = Field(description="0-100 percentage")

    @classmethod
    def from_entity(cls, entity: SectionProgress) -> "SectionProgressResponse":
        """Create response from entity."""
        return cls(
            section_id=entity.section_id,
            title=entity.title,
            total_lessons=entity.total_lessons,
            completed_lessons=entity.completed_lessons,
            percentage=entity.percentage,
        )


class CourseProgressResponse(BaseModel):
    """Course progress, optionally broken down by section."""

    course_id: UUID
    total_lessons: int
    completed_lessons: int
    percentage: int = Field(description="0-100 percentage")
    sections: list[SectionProgressResponse] = Field(default_factory=list)
    completed_lesson_ids: list[UUID] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls,
        entity: CourseProgress,
        sections: list[SectionProgress] | None = None,
        completed_lesson_ids: set[UUID] | None = None,
    ) -> "CourseProgressResponse":
        """Create response from entity."""
        return cls(
            course_id=entity.course_id,
            total_lessons=entity.total_lessons,
            completed_lessons=entity.completed_lessons,
            percentage=entity.percentage,
            sections=[SectionProgressResponse.from_entity(s) for s in sections or []],
            completed_lesson_ids=sorted(completed_lesson_ids or [], key=str),
        )


class LearnerStatsResponse(BaseModel):
    """Progress summary across a learner's enrollments."""

    total_courses: int
    completed_courses: int
    in_progress_courses: int
    average_progress: int = Field(description="0-100 percentage")

    @classmethod
    def from_entity(cls, entity: LearnerStats) -> "LearnerStatsResponse":
        """Create response from entity."""
        return cls(
            total_courses=entity.total_courses,
            completed_courses=entity.completed_courses,
            in_progress_courses=entity.in_progress_courses,
            average_progress=entity.average_progress,
        )


# ==============================================================================
# Enrollment Schemas
# ==============================================================================


class EnrollRequest(BaseModel):
    """Enrollment creation request (checkout integration)."""

    user_id: UUID = Field(..., description="User UUID")
    course_id: UUID = Field(..., description="Course UUID")


class EnrollmentResponse(BaseModel):
    """Enrollment response."""

    course_id: UUID
    user_id: UUID
    status: str
    enrolled_at: datetime
    progress: CourseProgressResponse | None = None

    @classmethod
    def from_entity(
        cls, entity: Enrollment, progress: CourseProgress | None = None
    ) -> "EnrollmentResponse":
        """Create response from entity."""
        return cls(
            course_id=entity.course_id,
            user_id=entity.user_id,
            status=entity.status,
            enrolled_at=entity.enrolled_at,
            progress=CourseProgressResponse.from_entity(progress) if progress else None,
        )


class EnrollmentListResponse(BaseModel):
    """List of enrollments with progress."""

    items: list[EnrollmentResponse]
    total: int
