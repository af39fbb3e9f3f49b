"""FastAPI dependencies for the course hierarchy."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.courses.service import CourseHierarchyService


async def get_hierarchy_service(request: Request) -> CourseHierarchyService:
    """Get course hierarchy service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "hierarchy_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Servico de cursos nao disponivel",
        )
    return app_state.hierarchy_service


HierarchyServiceDep = Annotated[CourseHierarchyService, Depends(get_hierarchy_service)]
