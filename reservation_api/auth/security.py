"""Password hashing and JWT issuance/verification."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from reservation_api import config
from reservation_api.domain.models import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("password verification failed on malformed hash")
        return False


def create_access_token(user: User, now: datetime | None = None) -> tuple[str, datetime]:
    """Issue a signed token for *user*; returns ``(token, expiration)``."""
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(hours=config.JWT_EXPIRES_HOURS)
    claims: dict[str, Any] = {
        "sub": user.id,
        "name": user.email,
        "jti": str(uuid.uuid4()),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "iss": config.JWT_ISSUER,
        "aud": config.JWT_AUDIENCE,
        "roles": [str(role) for role in user.roles],
    }
    token = jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    logger.info("token issued", extra={"extra_fields": {"user_id": user.id}})
    return token, expires_at


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify *token* and return its claims.

    Raises:
        InvalidTokenError: if the signature, issuer, audience or expiry is wrong.
    """
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            issuer=config.JWT_ISSUER,
            audience=config.JWT_AUDIENCE,
            options={"require": ["exp", "iss", "aud", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("Invalid token") from exc
