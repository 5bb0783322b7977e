"""FastAPI dependencies resolving the bearer token into a CurrentUser."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from reservation_api.auth.context import CurrentUser
from reservation_api.auth.security import InvalidTokenError, decode_access_token
from reservation_api.wiring import user_repo

logger = logging.getLogger(__name__)


def _extract_bearer_token(request: Request) -> str:
    """Extract Bearer token from Authorization header.

    Raises:
        HTTPException: 401 if header missing or malformed.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    return parts[1]


def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticated caller, or 401."""
    token = _extract_bearer_token(request)
    try:
        claims = decode_access_token(token)
    except InvalidTokenError as exc:
        logger.info("rejected bearer token", extra={"extra_fields": {"reason": str(exc)}})
        raise HTTPException(status_code=401, detail=str(exc))

    user = user_repo.get(claims["sub"])
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")

    return CurrentUser.from_user(user)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency: authenticated caller holding the Admin role, or 403."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user
