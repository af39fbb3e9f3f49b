"""Pydantic schemas for lesson quizzes.

Request and response models for:
- Quiz retrieval (learner view, no correctness flags)
- Attempt submission and scoring
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .models import QuestionResult, QuizAttempt, QuizOption, QuizQuestion, QuizScore


# ==============================================================================
# Quiz Schemas
# ==============================================================================


class QuizOptionResponse(BaseModel):
    """Answer option as shown to learners."""

    id: UUID
    text: str
    position: int

    @classmethod
    def from_entity(cls, option: QuizOption) -> "QuizOptionResponse":
        """Create response from entity."""
        return cls(id=option.id, text=option.text, position=option.position)


class QuizQuestionResponse(BaseModel):
    """Question with its options, correctness hidden."""

    id: UUID
    text: str
    position: int
    options: list[QuizOptionResponse]

    @classmethod
    def from_entity(cls, question: QuizQuestion) -> "QuizQuestionResponse":
        """Create response from entity."""
        options = sorted(question.options, key=lambda o: (o.position, str(o.id)))
        return cls(
            id=question.id,
            text=question.text,
            position=question.position,
            options=[QuizOptionResponse.from_entity(o) for o in options],
        )


class QuizResponse(BaseModel):
    """Quiz of a lesson."""

    lesson_id: UUID
    questions: list[QuizQuestionResponse]
    total_questions: int
    required_score: int = Field(description="Correct answers needed to pass")


# ==============================================================================
# Attempt Schemas
# ==============================================================================


class SubmitAttemptRequest(BaseModel):
    """Quiz submission: question_id -> selected option_id (null = blank)."""

    answers: dict[UUID, UUID | None] = Field(default_factory=dict)


class QuestionResultResponse(BaseModel):
    """Per-question outcome of a submission."""

    question_id: UUID
    selected_option_id: UUID | None = None
    correct_option_id: UUID | None = None
    is_correct: bool

    @classmethod
    def from_entity(cls, result: QuestionResult) -> "QuestionResultResponse":
        """Create response from entity."""
        return cls(
            question_id=result.question_id,
            selected_option_id=result.selected_option_id,
            correct_option_id=result.correct_option_id,
            is_correct=result.is_correct,
        )


class QuizAttemptResponse(BaseModel):
    """Stored quiz attempt."""

    lesson_id: UUID
    course_id: UUID
    score: int
    total_questions: int
    passed: bool
    answers: dict[UUID, UUID] = Field(default_factory=dict)
    completed_at: datetime
    results: list[QuestionResultResponse] | None = None
    lesson_completed: bool | None = None

    @classmethod
    def from_entity(
        cls,
        attempt: QuizAttempt,
        score: QuizScore | None = None,
        lesson_completed: bool | None = None,
    ) -> "QuizAttemptResponse":
        """Create response from entity."""
        return cls(
            lesson_id=attempt.lesson_id,
            course_id=attempt.course_id,
            score=attempt.score,
            total_questions=attempt.total_questions,
            passed=attempt.passed,
            answers=attempt.answers,
            completed_at=attempt.completed_at,
            results=[QuestionResultResponse.from_entity(r) for r in score.results]
            if score
            else None,
            lesson_completed=lesson_completed,
        )
