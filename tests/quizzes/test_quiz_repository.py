"""Tests for QuizRepository (mocked session)."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from src.quizzes.models import QuizAttempt
from src.quizzes.repository import QuizRepository


@pytest.fixture
def mock_session():
    """Mock Cassandra session; prepared statements are the CQL text itself."""
    session = Mock()
    session.prepare = Mock(side_effect=lambda cql: cql)
    session.aexecute = AsyncMock(return_value=Mock())
    return session


class TestQuizRepository:
    """Tests for quiz persistence."""

    @pytest.mark.asyncio
    async def test_list_questions_loads_options(self, mock_session) -> None:
        """Each question should get the options of its own partition."""
        lesson_id, question_id = uuid4(), uuid4()
        question_row = SimpleNamespace(
            id=question_id, lesson_id=lesson_id, position=1, text="Dose maxima?"
        )
        option_rows = [
            SimpleNamespace(
                id=uuid4(), question_id=question_id, position=i, text="", is_correct=i == 0
            )
            for i in range(2)
        ]
        mock_session.aexecute = AsyncMock(side_effect=[[question_row], option_rows])
        repository = QuizRepository(mock_session, "test_keyspace")

        questions = await repository.list_questions(lesson_id)

        assert len(questions) == 1
        assert len(questions[0].options) == 2
        assert questions[0].correct_option.id == option_rows[0].id
        cql, params = mock_session.aexecute.call_args.args
        assert "quiz_options_by_question" in cql
        assert params == [question_id]

    @pytest.mark.asyncio
    async def test_upsert_attempt_is_single_insert(self, mock_session) -> None:
        """Resubmission should overwrite the row keyed by (user_id, lesson_id)."""
        repository = QuizRepository(mock_session, "test_keyspace")
        attempt = QuizAttempt(
            user_id=uuid4(),
            lesson_id=uuid4(),
            course_id=uuid4(),
            score=2,
            total_questions=3,
            passed=False,
            answers={uuid4(): uuid4()},
            completed_at=datetime.now(UTC),
        )

        await repository.upsert_attempt(attempt)

        mock_session.aexecute.assert_awaited_once()
        cql, params = mock_session.aexecute.call_args.args
        assert "INSERT INTO test_keyspace.quiz_attempts" in cql
        assert "IF NOT EXISTS" not in cql
        assert params[:2] == [attempt.user_id, attempt.lesson_id]
        assert params[6] == attempt.answers

    @pytest.mark.asyncio
    async def test_find_attempt_missing(self, mock_session) -> None:
        result = Mock()
        result.one.return_value = None
        mock_session.aexecute = AsyncMock(return_value=result)
        repository = QuizRepository(mock_session, "test_keyspace")

        assert await repository.find_attempt(uuid4(), uuid4()) is None
