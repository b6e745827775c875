from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum

import jwt
from src.core.config import get_settings


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.SUPERADMIN)


def create_access_token(
    subject: str,
    *,
    role: str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed JWT access token."""
    settings = get_settings()

    if not Role.contains(role):
        raise TokenError(f"Unsupported role: {role}")

    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    payload = {
        "sub": subject,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "iss": settings.app_name,
    }

    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and validate a JWT access token."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "role", "exp"]},
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    if not Role.contains(payload.get("role", "")):
        raise TokenError(f"Unsupported role: {payload.get('role')}")
    return payload
