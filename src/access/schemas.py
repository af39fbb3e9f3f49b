"""Pydantic schemas for access decisions."""

from uuid import UUID

from pydantic import BaseModel

from src.access.models import AccessDecision, AccessReason


class AccessDecisionResponse(BaseModel):
    """Access decision for the current (optional) user."""

    course_id: UUID
    lesson_id: UUID | None = None
    granted: bool
    reason: AccessReason

    @classmethod
    def from_entity(cls, decision: AccessDecision) -> "AccessDecisionResponse":
        """Create response from entity."""
        return cls(
            course_id=decision.course_id,
            lesson_id=decision.lesson_id,
            granted=decision.granted,
            reason=decision.reason,
        )
