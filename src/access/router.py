"""Access decision API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from src.access.dependencies import AccessResolverDep
from src.access.schemas import AccessDecisionResponse
from src.auth.dependencies import OptionalUser
from src.core.errors import handle_engine_error
from src.core.exceptions import EngineError


router = APIRouter(prefix="/v1/access", tags=["access"])


@router.get(
    "/courses/{course_id}",
    response_model=AccessDecisionResponse,
    summary="Resolve access to a course or lesson",
)
async def get_access_decision(
    course_id: UUID,
    resolver: AccessResolverDep,
    user: OptionalUser,
    lesson_id: UUID | None = Query(None, description="Lesson UUID"),
) -> AccessDecisionResponse:
    """Tell the caller whether they may view the course (or one of its lessons).

    Denial is returned as data (``granted=false``) so the UI can offer enrollment.
    """
    try:
        decision = await resolver.resolve_access(
            user.id if user else None, course_id, lesson_id
        )
    except EngineError as e:
        raise handle_engine_error(e) from e

    return AccessDecisionResponse.from_entity(decision)
