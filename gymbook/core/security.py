from __future__ import annotations

import enum
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from gymbook.core.settings import settings


class Role(str, enum.Enum):
    CLIENT = "client"
    COACH = "coach"
    ADMIN = "admin"


def _now() -> datetime:
    return datetime.now(UTC)


def create_access_token(
    sub: str, role: Role, expires_delta: timedelta | None = None
) -> str:
    """Mint an access token. Production tokens come from the auth service;
    this exists for scripts and tests sharing the same secret."""
    now = _now()
    ttl = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": sub,
        "role": role.value,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str, expected_type: str = "access") -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as e:
        raise ValueError("Invalid token.") from e
    if payload.get("type") != expected_type:
        raise ValueError("Invalid token type.")
    return payload
