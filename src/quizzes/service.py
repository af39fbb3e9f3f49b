"""Quiz evaluation service layer.

Business logic for:
- Scoring a submission against the correct options
- Learner-facing quiz retrieval (without correctness flags)
- Latest-attempt persistence per (user, lesson)
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from uuid import UUID

import structlog

from src.access.models import AccessDecision
from src.core.exceptions import AccessDeniedError, ValidationError
from src.quizzes.models import QuestionResult, QuizAttempt, QuizQuestion, QuizScore
from src.quizzes.repository import QuizRepository


logger = structlog.get_logger(__name__)


def evaluate_answers(
    questions: list[QuizQuestion],
    answers: Mapping[UUID, UUID | None],
) -> QuizScore:
    """Score answers against a lesson's questions.

    Unanswered questions count toward the total only. Questions are
    evaluated in (position, id) order.

    Raises:
        ValidationError: If an answer targets a question outside the quiz,
            or selects an option of a different question
    """
    by_id = {question.id: question for question in questions}

    for question_id, option_id in answers.items():
        question = by_id.get(question_id)
        if question is None:
            raise ValidationError("Resposta para pergunta inexistente no quiz")
        if option_id is not None and not question.has_option(option_id):
            raise ValidationError("Opcao nao pertence a pergunta")

    results = []
    for question in sorted(questions, key=lambda q: (q.position, str(q.id))):
        correct = question.correct_option
        results.append(
            QuestionResult(
                question_id=question.id,
                selected_option_id=answers.get(question.id),
                correct_option_id=correct.id if correct else None,
            )
        )
    return QuizScore(results)


class QuizService:
    """Service for quiz scoring and attempts."""

    def __init__(self, repository: QuizRepository):
        self.repository = repository

    async def get_quiz(self, lesson_id: UUID) -> list[QuizQuestion]:
        """Get the questions of a lesson, ordered by position."""
        questions = await self.repository.list_questions(lesson_id)
        return sorted(questions, key=lambda q: (q.position, str(q.id)))

    async def score(
        self, lesson_id: UUID, answers: Mapping[UUID, UUID | None]
    ) -> QuizScore:
        """Score a submission without persisting it."""
        questions = await self.repository.list_questions(lesson_id)
        return evaluate_answers(questions, answers)

    async def submit_attempt(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        answers: Mapping[UUID, UUID | None],
        access: AccessDecision | None,
    ) -> tuple[QuizAttempt, QuizScore]:
        """Score and store an attempt, replacing the previous one.

        Raises:
            AccessDeniedError: If ``access`` does not authorize this user/lesson
            ValidationError: If the answers do not match the quiz
        """
        if access is None or not access.authorizes(user_id, course_id, lesson_id):
            raise AccessDeniedError

        result = await self.score(lesson_id, answers)

        attempt = QuizAttempt(
            user_id=user_id,
            lesson_id=lesson_id,
            course_id=course_id,
            score=result.score,
            total_questions=result.total,
            passed=result.passed,
            answers={q: o for q, o in answers.items() if o is not None},
            completed_at=datetime.now(UTC),
        )
        await self.repository.upsert_attempt(attempt)

        logger.info(
            "quiz_attempt_submitted",
            user_id=str(user_id),
            lesson_id=str(lesson_id),
            score=attempt.score,
            total=attempt.total_questions,
            passed=attempt.passed,
        )
        return attempt, result

    async def get_attempt(self, user_id: UUID, lesson_id: UUID) -> QuizAttempt | None:
        """Get the current attempt, if any."""
        return await self.repository.find_attempt(user_id, lesson_id)
