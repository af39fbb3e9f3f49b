"""Cassandra access for quiz questions, options and attempts."""

import asyncio
from uuid import UUID

from src.core.database.repository import CassandraRepository
from src.quizzes.models import QuizAttempt, QuizOption, QuizQuestion


class QuizRepository(CassandraRepository):
    """Quiz content reads and attempt upserts."""

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_questions_by_lesson = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.quiz_questions_by_lesson
            WHERE lesson_id = ?
        """)
        self._get_options_by_question = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.quiz_options_by_question
            WHERE question_id = ?
        """)
        self._get_attempt = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.quiz_attempts
            WHERE user_id = ? AND lesson_id = ?
        """)
        self._upsert_attempt = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.quiz_attempts
            (user_id, lesson_id, course_id, score, total_questions, passed,
             answers, completed_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

    async def list_questions(self, lesson_id: UUID) -> list[QuizQuestion]:
        """Get the questions of a lesson with their options."""
        rows = await self._execute(self._get_questions_by_lesson, [lesson_id])
        questions = [QuizQuestion.from_row(row) for row in rows]

        option_lists = await asyncio.gather(
            *(self._list_options(question.id) for question in questions)
        )
        for question, options in zip(questions, option_lists, strict=True):
            question.options = options
        return questions

    async def _list_options(self, question_id: UUID) -> list[QuizOption]:
        rows = await self._execute(self._get_options_by_question, [question_id])
        return [QuizOption.from_row(row) for row in rows]

    async def find_attempt(self, user_id: UUID, lesson_id: UUID) -> QuizAttempt | None:
        """Get the current attempt for (user_id, lesson_id)."""
        result = await self._execute(self._get_attempt, [user_id, lesson_id])
        row = result.one()
        return QuizAttempt.from_row(row) if row else None

    async def upsert_attempt(self, attempt: QuizAttempt) -> QuizAttempt:
        """Write the attempt, replacing any previous one for (user_id, lesson_id)."""
        await self._execute(
            self._upsert_attempt,
            [
                attempt.user_id,
                attempt.lesson_id,
                attempt.course_id,
                attempt.score,
                attempt.total_questions,
                attempt.passed,
                attempt.answers,
                attempt.completed_at,
            ],
        )
        return attempt
