"""Tests for access resolution precedence."""

from uuid import uuid4

import pytest

from src.access.models import AccessDecision, AccessReason
from src.access.service import AccessResolver
from src.core.exceptions import (
    AccessDeniedError,
    CourseNotFoundError,
    LessonNotFoundError,
)
from src.courses.models import ContentStatus
from tests.fakes import FakeCourseRepository, FakeEnrollmentRepository


class TestResolveAccess:
    """Tests for resolve_access."""

    @pytest.mark.asyncio
    async def test_free_preview_for_anonymous(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        """A free lesson of a published course should be open to anyone."""
        course, lessons = course_repository.seed_course()
        lessons[0].is_preview_free = True

        decision = await resolver.resolve_access(None, course.id, lessons[0].id)

        assert decision.granted
        assert decision.reason == AccessReason.FREE_PREVIEW

    @pytest.mark.asyncio
    async def test_free_preview_requires_published_course(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        """A free lesson of a draft course should be denied to strangers."""
        course, lessons = course_repository.seed_course(status=ContentStatus.DRAFT)
        lessons[0].is_preview_free = True

        decision = await resolver.resolve_access(uuid4(), course.id, lessons[0].id)

        assert not decision.granted
        assert decision.reason == AccessReason.DENIED

    @pytest.mark.asyncio
    async def test_free_preview_wins_over_enrollment(
        self,
        resolver: AccessResolver,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        """Precedence: free preview is checked before enrollment."""
        course, lessons = course_repository.seed_course()
        lessons[0].is_preview_free = True
        enrollment_repository.enroll(user_id, course.id)

        decision = await resolver.resolve_access(user_id, course.id, lessons[0].id)

        assert decision.reason == AccessReason.FREE_PREVIEW

    @pytest.mark.asyncio
    async def test_owner_of_draft_course(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository, user_id
    ) -> None:
        """The instructor should access their own unpublished course."""
        course, lessons = course_repository.seed_course(
            instructor_id=user_id, status=ContentStatus.DRAFT
        )

        decision = await resolver.resolve_access(user_id, course.id, lessons[1].id)

        assert decision.reason == AccessReason.OWNER

    @pytest.mark.asyncio
    async def test_owner_wins_over_enrollment(
        self,
        resolver: AccessResolver,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        """Precedence: ownership is checked before enrollment."""
        course, _ = course_repository.seed_course(instructor_id=user_id)
        enrollment_repository.enroll(user_id, course.id)

        decision = await resolver.resolve_access(user_id, course.id)

        assert decision.reason == AccessReason.OWNER

    @pytest.mark.asyncio
    async def test_enrolled_user(
        self,
        resolver: AccessResolver,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        """An active enrollment should grant access to paid lessons."""
        course, lessons = course_repository.seed_course()
        enrollment_repository.enroll(user_id, course.id)

        decision = await resolver.resolve_access(user_id, course.id, lessons[1].id)

        assert decision.granted
        assert decision.reason == AccessReason.ENROLLED

    @pytest.mark.asyncio
    async def test_inactive_enrollment_denied(
        self,
        resolver: AccessResolver,
        course_repository: FakeCourseRepository,
        enrollment_repository: FakeEnrollmentRepository,
        user_id,
    ) -> None:
        """Only ACTIVE enrollments grant access."""
        course, _ = course_repository.seed_course()
        enrollment_repository.enroll(user_id, course.id, status="cancelled")

        decision = await resolver.resolve_access(user_id, course.id)

        assert decision.reason == AccessReason.DENIED

    @pytest.mark.asyncio
    async def test_stranger_denied(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        """No preview, not owner, not enrolled: denied, not raised."""
        course, lessons = course_repository.seed_course()

        decision = await resolver.resolve_access(uuid4(), course.id, lessons[0].id)

        assert not decision.granted
        assert decision.reason == AccessReason.DENIED

    @pytest.mark.asyncio
    async def test_anonymous_skips_owner_and_enrollment(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        """Anonymous callers get only free previews."""
        course, lessons = course_repository.seed_course()

        decision = await resolver.resolve_access(None, course.id, lessons[0].id)

        assert decision.reason == AccessReason.DENIED

    @pytest.mark.asyncio
    async def test_missing_course_raises(self, resolver: AccessResolver) -> None:
        with pytest.raises(CourseNotFoundError):
            await resolver.resolve_access(uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_missing_lesson_raises(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        course, _ = course_repository.seed_course()

        with pytest.raises(LessonNotFoundError):
            await resolver.resolve_access(uuid4(), course.id, uuid4())

    @pytest.mark.asyncio
    async def test_lesson_of_other_course_raises(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        """A lesson outside the course is reported as not found."""
        course, _ = course_repository.seed_course()
        _, other_lessons = course_repository.seed_course()
        other_lessons[0].is_preview_free = True

        with pytest.raises(LessonNotFoundError):
            await resolver.resolve_access(None, course.id, other_lessons[0].id)

    @pytest.mark.asyncio
    async def test_require_access_raises_when_denied(
        self, resolver: AccessResolver, course_repository: FakeCourseRepository
    ) -> None:
        course, _ = course_repository.seed_course()

        with pytest.raises(AccessDeniedError):
            await resolver.require_access(uuid4(), course.id)


class TestAccessDecision:
    """Tests for AccessDecision.authorizes."""

    def test_authorizes_same_user_course_lesson(self) -> None:
        user_id, course_id, lesson_id = uuid4(), uuid4(), uuid4()
        decision = AccessDecision(user_id, course_id, AccessReason.ENROLLED, lesson_id)

        assert decision.authorizes(user_id, course_id, lesson_id)

    def test_rejects_other_user(self) -> None:
        course_id, lesson_id = uuid4(), uuid4()
        decision = AccessDecision(uuid4(), course_id, AccessReason.ENROLLED, lesson_id)

        assert not decision.authorizes(uuid4(), course_id, lesson_id)

    def test_rejects_other_lesson(self) -> None:
        user_id, course_id = uuid4(), uuid4()
        decision = AccessDecision(user_id, course_id, AccessReason.OWNER, uuid4())

        assert not decision.authorizes(user_id, course_id, uuid4())

    def test_course_level_decision_never_authorizes_lesson_write(self) -> None:
        """Lesson membership is only checked when resolving for the lesson."""
        user_id, course_id = uuid4(), uuid4()
        decision = AccessDecision(user_id, course_id, AccessReason.OWNER)

        assert not decision.authorizes(user_id, course_id, uuid4())

    def test_denied_or_anonymous_never_authorizes(self) -> None:
        user_id, course_id = uuid4(), uuid4()
        lesson_id = uuid4()
        denied = AccessDecision(user_id, course_id, AccessReason.DENIED, lesson_id)
        anonymous = AccessDecision(None, course_id, AccessReason.FREE_PREVIEW, lesson_id)

        assert not denied.authorizes(user_id, course_id, lesson_id)
        assert not anonymous.authorizes(user_id, course_id, lesson_id)
