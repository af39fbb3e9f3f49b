"""Course hierarchy API endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.auth.dependencies import OptionalUser
from src.core.errors import handle_engine_error
from src.core.exceptions import EngineError
from src.courses.dependencies import HierarchyServiceDep
from src.courses.schemas import CourseIndexResponse


router = APIRouter(prefix="/v1/courses", tags=["courses"])


@router.get(
    "/{course_id}/index",
    response_model=CourseIndexResponse,
    summary="Get ordered course index",
)
async def get_course_index(
    course_id: UUID,
    hierarchy: HierarchyServiceDep,
    user: OptionalUser,
) -> CourseIndexResponse:
    """Get the ordered sections and lessons of a course (public).

    Draft courses are only visible to their instructor.
    """
    try:
        index = await hierarchy.build_index(course_id)
    except EngineError as e:
        raise handle_engine_error(e) from e

    course = index.course
    if not course.is_published and (user is None or user.id != course.instructor_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Curso nao encontrado",
        )

    return CourseIndexResponse.from_index(index)
