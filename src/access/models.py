"""Access decision model.

An ``AccessDecision`` is the only credential the write paths accept: it is
produced by ``AccessResolver`` and names the user, course and lesson it was
computed for.
"""

from enum import Enum
from uuid import UUID


class AccessReason(str, Enum):
    """Why access was granted (or not)."""

    FREE_PREVIEW = "FREE_PREVIEW"
    OWNER = "OWNER"
    ENROLLED = "ENROLLED"
    DENIED = "DENIED"


class AccessDecision:
    """Outcome of an access resolution."""

    def __init__(
        self,
        user_id: UUID | None,
        course_id: UUID,
        reason: AccessReason,
        lesson_id: UUID | None = None,
    ):
        self.user_id = user_id
        self.course_id = course_id
        self.lesson_id = lesson_id
        self.reason = reason

    @property
    def granted(self) -> bool:
        return self.reason != AccessReason.DENIED

    def authorizes(self, user_id: UUID, course_id: UUID, lesson_id: UUID) -> bool:
        """Check the decision grants this exact user a write on this lesson.

        Only a decision resolved for the lesson itself qualifies: the resolver
        has then checked that the lesson belongs to the course. A course-level
        decision never authorizes a lesson write.
        """
        if not self.granted or self.user_id is None:
            return False
        if self.user_id != user_id or self.course_id != course_id:
            return False
        return self.lesson_id is not None and self.lesson_id == lesson_id

    def __repr__(self) -> str:
        return (
            f"<AccessDecision {self.reason.value} user={self.user_id} "
            f"course={self.course_id} lesson={self.lesson_id}>"
        )
