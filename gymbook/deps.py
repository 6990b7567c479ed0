from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from gymbook.core.errors import error_body
from gymbook.core.logging import bind_actor
from gymbook.core.security import Role, decode_token
from gymbook.db import get_db

__all__ = ["Actor", "get_current_actor", "get_db", "require_roles"]


@dataclass(frozen=True)
class Actor:
    """Authenticated caller. Accounts live in the auth service; only the
    token claims are known here."""

    subject: str
    role: Role

    @property
    def id(self) -> uuid.UUID | None:
        try:
            return uuid.UUID(self.subject)
        except ValueError:
            return None


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_body(code, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token_from_request(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip()
    return None


def get_current_actor(request: Request) -> Actor:
    token = _extract_token_from_request(request)
    if not token:
        raise _unauthorized("not_authenticated", "Authentication required")

    try:
        payload = decode_token(token, expected_type="access")
    except ValueError:
        raise _unauthorized("invalid_token", "Invalid or expired token") from None

    sub = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise _unauthorized("invalid_token", "Token carries no valid role") from None
    if not sub:
        raise _unauthorized("invalid_token", "Malformed token")

    actor = Actor(subject=str(sub), role=role)
    # clientes e coaches são identificados por UUID
    if role != Role.ADMIN and actor.id is None:
        raise _unauthorized("invalid_token", "Malformed token subject")

    bind_actor(actor.subject, role.value)
    return actor


def require_roles(*allowed: Role) -> Callable[[Request], Actor]:
    def wrapper(request: Request) -> Actor:
        actor = get_current_actor(request)
        if actor.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=error_body("forbidden_role", "You do not have access to this resource"),
            )
        return actor

    return wrapper
