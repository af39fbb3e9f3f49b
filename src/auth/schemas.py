"""Pydantic schemas for authentication."""

from uuid import UUID

from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """Caller identity extracted from a validated access token."""

    id: UUID
    email: str = ""
    role: str = "student"
