"""Tests for course progress and learner stats aggregation."""

from uuid import uuid4

import pytest

from src.core.exceptions import CourseNotFoundError
from src.progress.aggregator import ProgressAggregator
from src.progress.models import calculate_percentage
from tests.fakes import (
    FakeCourseRepository,
    FakeEnrollmentRepository,
    FakeLessonProgressRepository,
)


class TestCalculatePercentage:
    """Tests for the rounding rule."""

    @pytest.mark.parametrize(
        ("completed", "total", "expected"),
        [
            (4, 5, 80),
            (0, 5, 0),
            (5, 5, 100),
            (2, 3, 67),
            (1, 3, 33),
            (1, 8, 13),
            (0, 0, 0),
        ],
    )
    def test_rounds_half_up(self, completed: int, total: int, expected: int) -> None:
        assert calculate_percentage(completed, total) == expected


class TestCourseProgress:
    """Tests for course_progress."""

    @pytest.mark.asyncio
    async def test_four_of_five(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        """4 of 5 lessons completed is 80%."""
        course, lessons = course_repository.seed_course(lessons_per_section=(3, 2))
        for lesson in lessons[:4]:
            progress_repository.complete(user_id, lesson)

        progress = await aggregator.course_progress(user_id, course.id)

        assert progress.total_lessons == 5
        assert progress.completed_lessons == 4
        assert progress.percentage == 80

    @pytest.mark.asyncio
    async def test_uncompleted_rows_not_counted(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        course, lessons = course_repository.seed_course(lessons_per_section=(2,))
        progress_repository.complete(user_id, lessons[0], completed=False)

        progress = await aggregator.course_progress(user_id, course.id)

        assert progress.completed_lessons == 0
        assert progress.percentage == 0

    @pytest.mark.asyncio
    async def test_other_users_rows_not_counted(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        course, lessons = course_repository.seed_course(lessons_per_section=(2,))
        progress_repository.complete(uuid4(), lessons[0])

        progress = await aggregator.course_progress(user_id, course.id)

        assert progress.completed_lessons == 0

    @pytest.mark.asyncio
    async def test_zero_lesson_course(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        user_id,
    ) -> None:
        """A course without lessons reports 0% and is never completed."""
        course = course_repository.add_course()

        progress = await aggregator.course_progress(user_id, course.id)

        assert progress.total_lessons == 0
        assert progress.percentage == 0
        assert not progress.is_completed

    @pytest.mark.asyncio
    async def test_missing_course_raises(
        self, aggregator: ProgressAggregator, user_id
    ) -> None:
        with pytest.raises(CourseNotFoundError):
            await aggregator.course_progress(user_id, uuid4())

    @pytest.mark.asyncio
    async def test_detail_breaks_down_sections(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        course, lessons = course_repository.seed_course(lessons_per_section=(2, 2))
        progress_repository.complete(user_id, lessons[0])
        progress_repository.complete(user_id, lessons[1])
        progress_repository.complete(user_id, lessons[2])

        progress, sections, completed = await aggregator.course_progress_detail(
            user_id, course.id
        )

        assert progress.percentage == 75
        assert [s.percentage for s in sections] == [100, 50]
        assert completed == {lessons[0].id, lessons[1].id, lessons[2].id}


class TestAggregateStats:
    """Tests for aggregate_stats."""

    @pytest.mark.asyncio
    async def test_no_enrollments(self, aggregator: ProgressAggregator, user_id) -> None:
        stats = await aggregator.aggregate_stats(user_id)

        assert stats.total_courses == 0
        assert stats.completed_courses == 0
        assert stats.in_progress_courses == 0
        assert stats.average_progress == 0

    @pytest.mark.asyncio
    async def test_mixed_enrollments(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        """Completed, in-progress, untouched and empty courses are classified."""
        done, done_lessons = course_repository.seed_course(lessons_per_section=(2,))
        half, half_lessons = course_repository.seed_course(lessons_per_section=(4,))
        untouched, _ = course_repository.seed_course(lessons_per_section=(3,))
        empty = course_repository.add_course()
        for course in (done, half, untouched, empty):
            enrollment_repository.enroll(user_id, course.id)
        for lesson in done_lessons:
            progress_repository.complete(user_id, lesson)
        progress_repository.complete(user_id, half_lessons[0])
        progress_repository.complete(user_id, half_lessons[1])

        stats = await aggregator.aggregate_stats(user_id)

        assert stats.total_courses == 4
        assert stats.completed_courses == 1
        assert stats.in_progress_courses == 1
        # (100 + 50 + 0) / 3, the empty course is excluded from the average
        assert stats.average_progress == 50

    @pytest.mark.asyncio
    async def test_average_uses_exact_percentages(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        progress_repository: FakeLessonProgressRepository,
        user_id,
    ) -> None:
        """1/3 and 1/3 average to 33.33, rounded once at the end."""
        first, first_lessons = course_repository.seed_course(lessons_per_section=(3,))
        second, second_lessons = course_repository.seed_course(lessons_per_section=(3,))
        enrollment_repository.enroll(user_id, first.id)
        enrollment_repository.enroll(user_id, second.id)
        progress_repository.complete(user_id, first_lessons[0])
        progress_repository.complete(user_id, second_lessons[0])

        stats = await aggregator.aggregate_stats(user_id)

        assert stats.average_progress == 33

    @pytest.mark.asyncio
    async def test_enrollment_of_deleted_course_counts_as_empty(
        self,
        aggregator: ProgressAggregator,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        enrollment_repository.enroll(user_id, uuid4())

        stats = await aggregator.aggregate_stats(user_id)

        assert stats.total_courses == 1
        assert stats.average_progress == 0

    @pytest.mark.asyncio
    async def test_inactive_enrollments_ignored(
        self,
        aggregator: ProgressAggregator,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        course, _ = course_repository.seed_course()
        enrollment_repository.enroll(user_id, course.id, status="cancelled")

        stats = await aggregator.aggregate_stats(user_id)

        assert stats.total_courses == 0
