"""Error kinds shared by the core components and the HTTP layer.

Core operations return a :class:`Result` instead of raising, the routers turn
the error kind into a fixed status code and a generic message.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    INTERNAL_FAILURE = "internal_failure"


STATUS_CODES = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL_FAILURE: 500,
}

DEFAULT_MESSAGES = {
    ErrorKind.UNAUTHORIZED: "Unauthorized",
    ErrorKind.FORBIDDEN: "Forbidden",
    ErrorKind.INVALID_REQUEST: "Invalid request",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.INTERNAL_FAILURE: "Internal server error",
}


@dataclass(frozen=True)
class Result:
    value: Any = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str | None = None):
        return cls(error=error, message=message)


def error_response(result_or_kind, message: str | None = None) -> JSONResponse:
    """Translate an error kind (or failed Result) into the JSON error body."""
    if isinstance(result_or_kind, Result):
        kind = result_or_kind.error
        message = message or result_or_kind.message
    else:
        kind = result_or_kind
    # Jamais de détail interne côté client
    if kind is ErrorKind.INTERNAL_FAILURE:
        message = DEFAULT_MESSAGES[kind]
    return JSONResponse(
        status_code=STATUS_CODES[kind],
        content={"success": False, "error": message or DEFAULT_MESSAGES[kind]},
    )


class ApiError(Exception):
    """Raised by request dependencies only, turned into :func:`error_response`."""

    def __init__(self, result: Result):
        super().__init__(result.error.value)
        self.result = result
