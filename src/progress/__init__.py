"""Learner progress tracking module.

Provides:
- Lesson completion (toggle and explicit set)
- Course progress and learner stats aggregation
- Course enrollment management
"""

from .models import (
    PROGRESS_TABLES_CQL,
    CourseProgress,
    Enrollment,
    EnrollmentStatus,
    LearnerStats,
    LessonProgress,
)


__all__ = [
    "PROGRESS_TABLES_CQL",
    "CourseProgress",
    "Enrollment",
    "EnrollmentStatus",
    "LearnerStats",
    "LessonProgress",
]
