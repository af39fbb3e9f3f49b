"""Pydantic schemas for video API.

Request and response models for video URL signing.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SignedUrlRequest(BaseModel):
    """Request for generating a signed video URL."""

    lesson_id: UUID = Field(..., description="Lesson whose video should be played")


class SignedUrlResponse(BaseModel):
    """Response with a signed video URL."""

    lesson_id: UUID
    url: str = Field(..., description="Signed, time-limited video URL")
    expires_at: datetime = Field(..., description="URL expiration time")
    access_reason: str = Field(..., description="Why access was granted")
