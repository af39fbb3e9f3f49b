"""FastAPI dependencies for access control.

Provides dependency injection for:
- Access resolver
- Lesson access gate shared by the progress, quiz and video endpoints
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from src.access.models import AccessDecision
from src.access.service import AccessResolver
from src.auth.schemas import AuthenticatedUser
from src.core.errors import handle_engine_error
from src.core.exceptions import AccessDeniedError, EngineError
from src.courses.models import Lesson


async def get_access_resolver(request: Request) -> AccessResolver:
    """Get access resolver from app state."""
    app_state = request.app.state
    if not getattr(app_state, "access_resolver", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Servico de acesso nao disponivel",
        )
    return app_state.access_resolver


AccessResolverDep = Annotated[AccessResolver, Depends(get_access_resolver)]


async def require_lesson_access(
    resolver: AccessResolver,
    user: AuthenticatedUser | None,
    lesson_id: UUID,
) -> tuple[Lesson, AccessDecision]:
    """Resolve access to a lesson or raise the matching HTTP error.

    Raises:
        HTTPException(404): Lesson or course does not exist
        HTTPException(401): Denied and the caller is anonymous
        HTTPException(403): Denied for an authenticated caller
    """
    try:
        lesson = await resolver.hierarchy.get_lesson(lesson_id)
        decision = await resolver.require_access(
            user.id if user else None, lesson.course_id, lesson.id
        )
    except AccessDeniedError as e:
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Autenticacao necessaria",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        raise handle_engine_error(e) from e
    except EngineError as e:
        raise handle_engine_error(e) from e

    return lesson, decision
