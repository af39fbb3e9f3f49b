"""FastAPI dependencies for authentication.

Provides dependency injection for:
- Current user extraction from JWT
- Optional user for endpoints open to anonymous callers
- API Key authentication for integrations
"""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from pydantic import ValidationError

from src.auth.schemas import AuthenticatedUser
from src.auth.security import decode_access_token
from src.config.settings import Settings, get_settings
from src.core.context import set_user_id


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header.

    Returns:
        Token string or None if not present
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _user_from_token(token: str) -> AuthenticatedUser:
    """Decode the token and build the caller identity.

    Raises:
        JWTError: If the token is invalid or carries a malformed subject
    """
    payload = decode_access_token(token)
    try:
        user = AuthenticatedUser(
            id=payload["sub"],
            email=payload.get("email", ""),
            role=payload.get("role", "student"),
        )
    except ValidationError as e:
        msg = "Invalid token subject"
        raise JWTError(msg) from e

    # Set user_id in context for logging
    set_user_id(str(user.id))
    return user


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> AuthenticatedUser:
    """Get current authenticated user from JWT token.

    Raises:
        HTTPException(401): If token is missing, invalid, or expired
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de acesso nao fornecido",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return _user_from_token(token)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalido ou expirado",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user_optional(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> AuthenticatedUser | None:
    """Get current user if authenticated, None otherwise.

    An invalid token is treated as an anonymous caller.
    """
    if not token:
        return None

    try:
        return _user_from_token(token)
    except JWTError:
        return None


# ==============================================================================
# Type Aliases for Cleaner Code
# ==============================================================================

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]

# Optional user (for endpoints that work both ways)
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)]


# ==============================================================================
# API Key Authentication (for integration endpoints)
# ==============================================================================


async def verify_master_api_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str:
    """Verify X-API-Key header against master API key.

    Used by the checkout integration to create enrollments.

    Raises:
        HTTPException(401): If API key is missing
        HTTPException(403): If API key is invalid
        HTTPException(503): If API key is not configured
    """
    api_key = request.headers.get("X-API-Key")

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API Key required",
        )

    if not settings.master_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API Key authentication not configured",
        )

    if not secrets.compare_digest(api_key, settings.master_api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API Key",
        )

    return api_key


MasterApiKey = Annotated[str, Depends(verify_master_api_key)]
