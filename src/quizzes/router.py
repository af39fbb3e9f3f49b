"""Lesson quiz API endpoints.

Provides routes for:
- Quiz retrieval (requires lesson access)
- Attempt submission (a passing attempt also completes the lesson)
- Current attempt lookup
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.access.dependencies import AccessResolverDep, require_lesson_access
from src.auth.dependencies import CurrentUser, OptionalUser
from src.core.errors import handle_engine_error
from src.core.exceptions import EngineError
from src.progress.dependencies import CompletionServiceDep

from .dependencies import QuizServiceDep
from .models import required_score
from .schemas import (
    QuizAttemptResponse,
    QuizQuestionResponse,
    QuizResponse,
    SubmitAttemptRequest,
)


router = APIRouter(prefix="/v1/quizzes", tags=["quizzes"])


@router.get(
    "/lessons/{lesson_id}",
    response_model=QuizResponse,
    summary="Get lesson quiz",
)
async def get_quiz(
    lesson_id: UUID,
    quiz_service: QuizServiceDep,
    resolver: AccessResolverDep,
    user: OptionalUser,
) -> QuizResponse:
    """Get the questions of a quiz lesson without the answer key."""
    await require_lesson_access(resolver, user, lesson_id)

    try:
        questions = await quiz_service.get_quiz(lesson_id)
    except EngineError as e:
        raise handle_engine_error(e) from e

    return QuizResponse(
        lesson_id=lesson_id,
        questions=[QuizQuestionResponse.from_entity(q) for q in questions],
        total_questions=len(questions),
        required_score=required_score(len(questions)),
    )


@router.post(
    "/lessons/{lesson_id}/attempts",
    response_model=QuizAttemptResponse,
    summary="Submit quiz attempt",
)
async def submit_attempt(
    lesson_id: UUID,
    data: SubmitAttemptRequest,
    quiz_service: QuizServiceDep,
    completion_service: CompletionServiceDep,
    resolver: AccessResolverDep,
    user: CurrentUser,
) -> QuizAttemptResponse:
    """Score and store an attempt, replacing the previous one.

    A passing attempt also marks the lesson as completed.
    """
    lesson, decision = await require_lesson_access(resolver, user, lesson_id)

    try:
        attempt, result = await quiz_service.submit_attempt(
            user_id=user.id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            answers=data.answers,
            access=decision,
        )
        lesson_completed = None
        if attempt.passed:
            progress = await completion_service.set_completion(
                user_id=user.id,
                lesson_id=lesson.id,
                course_id=lesson.course_id,
                completed=True,
                access=decision,
            )
            lesson_completed = progress.completed
    except EngineError as e:
        raise handle_engine_error(e) from e

    return QuizAttemptResponse.from_entity(attempt, result, lesson_completed)


@router.get(
    "/lessons/{lesson_id}/attempts/me",
    response_model=QuizAttemptResponse,
    summary="Get my current attempt",
)
async def get_my_attempt(
    lesson_id: UUID,
    quiz_service: QuizServiceDep,
    user: CurrentUser,
) -> QuizAttemptResponse:
    """Get the caller's latest attempt for a quiz lesson."""
    try:
        attempt = await quiz_service.get_attempt(user.id, lesson_id)
    except EngineError as e:
        raise handle_engine_error(e) from e

    if attempt is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tentativa nao encontrada",
        )
    return QuizAttemptResponse.from_entity(attempt)
