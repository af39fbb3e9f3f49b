"""Access control module.

Provides:
- Access resolution (free preview, owner, enrollment)
- Access decisions consumed by the progress and quiz write paths
"""

from .models import AccessDecision, AccessReason


__all__ = [
    "AccessDecision",
    "AccessReason",
]
