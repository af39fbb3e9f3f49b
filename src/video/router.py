"""Video API endpoints.

Provides routes for:
- Generating signed video URLs for lessons the caller may view
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from src.access.dependencies import AccessResolverDep, require_lesson_access
from src.auth.dependencies import OptionalUser
from src.config.settings import Settings, get_settings
from src.video.schemas import SignedUrlRequest, SignedUrlResponse
from src.video.service import ContentSigner, VideoNotConfiguredError


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/video", tags=["video"])


def get_content_signer(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ContentSigner:
    """Get content signer instance."""
    return ContentSigner(settings)


ContentSignerDep = Annotated[ContentSigner, Depends(get_content_signer)]


@router.post(
    "/signed-url",
    response_model=SignedUrlResponse,
    summary="Generate signed video URL",
)
async def generate_signed_url(
    data: SignedUrlRequest,
    signer: ContentSignerDep,
    resolver: AccessResolverDep,
    user: OptionalUser,
) -> SignedUrlResponse:
    """Generate a time-limited URL for a lesson video.

    Anonymous callers only get free preview lessons of published courses.
    """
    lesson, decision = await require_lesson_access(resolver, user, data.lesson_id)

    if not lesson.video_path:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Video nao encontrado para esta aula",
        )

    try:
        signed = signer.sign(lesson.video_path)
    except VideoNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    logger.info(
        "video_url_issued",
        lesson_id=str(lesson.id),
        course_id=str(lesson.course_id),
        reason=decision.reason.value,
    )
    return SignedUrlResponse(
        lesson_id=lesson.id,
        url=signed.url,
        expires_at=signed.expires_at,
        access_reason=decision.reason.value,
    )
