"""Database models for lesson quizzes.

Cassandra table definitions for:
- Questions: Ordered questions per lesson
- Options: Ordered options per question (with the correctness flag)
- Attempts: Latest attempt per (user, lesson)
"""

import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from src.courses.models import ensure_utc_aware


# Minimum share of correct answers to pass, rounded up (7/10, 3/4, 4/5)
PASS_THRESHOLD = Decimal("0.7")


def required_score(total: int) -> int:
    """Correct answers needed to pass a quiz with ``total`` questions."""
    return math.ceil(Decimal(total) * PASS_THRESHOLD)


def is_passing(score: int, total: int) -> bool:
    """A quiz with no questions can never be passed."""
    return total > 0 and score >= required_score(total)


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

QUIZ_QUESTIONS_BY_LESSON_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.quiz_questions_by_lesson (
    lesson_id UUID,
    position INT,
    id UUID,
    text TEXT,
    PRIMARY KEY ((lesson_id), position, id)
) WITH CLUSTERING ORDER BY (position ASC, id ASC)
"""

QUIZ_OPTIONS_BY_QUESTION_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.quiz_options_by_question (
    question_id UUID,
    position INT,
    id UUID,
    text TEXT,
    is_correct BOOLEAN,
    PRIMARY KEY ((question_id), position, id)
) WITH CLUSTERING ORDER BY (position ASC, id ASC)
"""

# Uma tentativa por usuario/aula; nova submissao substitui a anterior
QUIZ_ATTEMPTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.quiz_attempts (
    user_id UUID,
    lesson_id UUID,
    course_id UUID,
    score INT,
    total_questions INT,
    passed BOOLEAN,
    answers MAP<UUID, UUID>,
    completed_at TIMESTAMP,
    PRIMARY KEY ((user_id), lesson_id)
)
"""

QUIZZES_TABLES_CQL = [
    QUIZ_QUESTIONS_BY_LESSON_TABLE_CQL,
    QUIZ_OPTIONS_BY_QUESTION_TABLE_CQL,
    QUIZ_ATTEMPTS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class QuizOption:
    """Answer option of a question."""

    def __init__(
        self,
        question_id: UUID,
        position: int,
        id: UUID | None = None,
        text: str = "",
        is_correct: bool = False,
    ):
        self.id = id or uuid4()
        self.question_id = question_id
        self.position = position
        self.text = text
        self.is_correct = is_correct

    @classmethod
    def from_row(cls, row: Any) -> "QuizOption":
        """Create QuizOption instance from Cassandra row."""
        return cls(
            id=row.id,
            question_id=row.question_id,
            position=row.position,
            text=row.text or "",
            is_correct=bool(row.is_correct),
        )

    def __repr__(self) -> str:
        return f"<QuizOption {self.id} correct={self.is_correct}>"


class QuizQuestion:
    """Multiple-choice question of a quiz lesson.

    A question without a correct option is unscoreable: it counts toward
    the total but can never be answered correctly.
    """

    def __init__(
        self,
        lesson_id: UUID,
        position: int,
        id: UUID | None = None,
        text: str = "",
        options: list[QuizOption] | None = None,
    ):
        self.id = id or uuid4()
        self.lesson_id = lesson_id
        self.position = position
        self.text = text
        self.options = options or []

    @property
    def correct_option(self) -> QuizOption | None:
        """First correct option, if any."""
        return next((o for o in self.options if o.is_correct), None)

    def has_option(self, option_id: UUID) -> bool:
        return any(o.id == option_id for o in self.options)

    @classmethod
    def from_row(cls, row: Any) -> "QuizQuestion":
        """Create QuizQuestion instance from Cassandra row (options loaded separately)."""
        return cls(
            id=row.id,
            lesson_id=row.lesson_id,
            position=row.position,
            text=row.text or "",
        )

    def __repr__(self) -> str:
        return f"<QuizQuestion {self.id} pos={self.position} options={len(self.options)}>"


class QuestionResult:
    """Outcome of one question in a scored submission."""

    def __init__(
        self,
        question_id: UUID,
        selected_option_id: UUID | None,
        correct_option_id: UUID | None,
    ):
        self.question_id = question_id
        self.selected_option_id = selected_option_id
        self.correct_option_id = correct_option_id

    @property
    def is_correct(self) -> bool:
        return (
            self.correct_option_id is not None
            and self.selected_option_id == self.correct_option_id
        )


class QuizScore:
    """Scored submission (not persisted)."""

    def __init__(self, results: list[QuestionResult]):
        self.results = results

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def score(self) -> int:
        return sum(1 for r in self.results if r.is_correct)

    @property
    def passed(self) -> bool:
        return is_passing(self.score, self.total)

    def __repr__(self) -> str:
        return f"<QuizScore {self.score}/{self.total} passed={self.passed}>"


class QuizAttempt:
    """Latest quiz attempt of a user for a lesson.

    Attributes:
        user_id: Learner
        lesson_id: Quiz lesson
        course_id: Course of the lesson
        score: Correct answers
        total_questions: Questions in the quiz at submission time
        passed: Whether the pass threshold was met
        answers: Submitted map question_id -> option_id
        completed_at: Submission timestamp
    """

    def __init__(
        self,
        user_id: UUID,
        lesson_id: UUID,
        course_id: UUID,
        score: int = 0,
        total_questions: int = 0,
        passed: bool = False,
        answers: dict[UUID, UUID] | None = None,
        completed_at: datetime | None = None,
    ):
        self.user_id = user_id
        self.lesson_id = lesson_id
        self.course_id = course_id
        self.score = score
        self.total_questions = total_questions
        self.passed = passed
        self.answers = answers or {}
        self.completed_at = ensure_utc_aware(completed_at) or datetime.now(UTC)

    @classmethod
    def from_row(cls, row: Any) -> "QuizAttempt":
        """Create QuizAttempt instance from Cassandra row."""
        return cls(
            user_id=row.user_id,
            lesson_id=row.lesson_id,
            course_id=row.course_id,
            score=row.score or 0,
            total_questions=row.total_questions or 0,
            passed=bool(row.passed),
            answers=dict(row.answers or {}),
            completed_at=row.completed_at,
        )

    def __repr__(self) -> str:
        return (
            f"<QuizAttempt user={self.user_id} lesson={self.lesson_id} "
            f"{self.score}/{self.total_questions} passed={self.passed}>"
        )
