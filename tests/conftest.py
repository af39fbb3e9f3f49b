"""Shared fixtures.

Environment is set before any ``src`` import so the cached settings pick it up.
"""

import os
import tempfile
from uuid import UUID, uuid4

import pytest


os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="trilha-logs-")
os.environ["AUTH_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ["MASTER_API_KEY"] = "test-master-key"
os.environ["CONTENT_SIGNING_KEY"] = "test-signing-key"
os.environ["CONTENT_URL_BASE"] = "https://media.test/videos"

from fastapi.testclient import TestClient  # noqa: E402

from src.access.service import AccessResolver  # noqa: E402
from src.courses.service import CourseHierarchyService  # noqa: E402
from src.progress.aggregator import ProgressAggregator  # noqa: E402
from src.progress.service import EnrollmentService, LessonCompletionService  # noqa: E402
from src.quizzes.service import QuizService  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeCourseRepository,
    FakeEnrollmentRepository,
    FakeLessonProgressRepository,
    FakeQuizRepository,
)


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def course_repository() -> FakeCourseRepository:
    return FakeCourseRepository()


@pytest.fixture
def enrollment_repository() -> FakeEnrollmentRepository:
    return FakeEnrollmentRepository()


@pytest.fixture
def progress_repository() -> FakeLessonProgressRepository:
    return FakeLessonProgressRepository()


@pytest.fixture
def quiz_repository() -> FakeQuizRepository:
    return FakeQuizRepository()


@pytest.fixture
def hierarchy(course_repository) -> CourseHierarchyService:
    return CourseHierarchyService(course_repository)


@pytest.fixture
def resolver(hierarchy, enrollment_repository) -> AccessResolver:
    return AccessResolver(hierarchy, enrollment_repository)


@pytest.fixture
def completion_service(progress_repository, hierarchy) -> LessonCompletionService:
    return LessonCompletionService(progress_repository, hierarchy)


@pytest.fixture
def enrollment_service(enrollment_repository, hierarchy) -> EnrollmentService:
    return EnrollmentService(enrollment_repository, hierarchy)


@pytest.fixture
def aggregator(
    hierarchy, progress_repository, enrollment_repository
) -> ProgressAggregator:
    return ProgressAggregator(hierarchy, progress_repository, enrollment_repository)


@pytest.fixture
def quiz_service(quiz_repository) -> QuizService:
    return QuizService(quiz_repository)


@pytest.fixture
def app(
    hierarchy,
    resolver,
    completion_service,
    enrollment_service,
    aggregator,
    quiz_service,
):
    """Application wired to the in-memory repositories (lifespan not run)."""
    from src.main import app

    app.state.hierarchy_service = hierarchy
    app.state.access_resolver = resolver
    app.state.completion_service = completion_service
    app.state.enrollment_service = enrollment_service
    app.state.progress_aggregator = aggregator
    app.state.quiz_service = quiz_service
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

