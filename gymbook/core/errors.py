"""Service-level results.

Services never raise for business-rule failures; they return ``Ok(value)`` or a
``ServiceError`` carrying a stable reason code the client can key messages on.
Routes turn errors into HTTP responses with :func:`raise_for_error`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    INVALID = "invalid"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable"


_STATUS_BY_KIND = {
    ErrorKind.INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNPROCESSABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    code: str
    message: str

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]


Result = Ok[T] | ServiceError


def invalid(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.INVALID, code, message)


def forbidden(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.FORBIDDEN, code, message)


def not_found(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, code, message)


def conflict(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.CONFLICT, code, message)


def unprocessable(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.UNPROCESSABLE, code, message)


def error_body(code: str, message: str) -> dict[str, str]:
    return {"error": code, "message": message, "toastMessage": message}


def raise_for_error(err: ServiceError) -> NoReturn:
    raise HTTPException(err.status_code, detail=error_body(err.code, err.message))


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise the matching HTTPException."""
    if isinstance(result, ServiceError):
        raise_for_error(result)
    return result.value
