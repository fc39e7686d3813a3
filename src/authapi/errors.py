"""Application error taxonomy and the mapping used by the error responder."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from werkzeug.exceptions import HTTPException


class ErrorKind(Enum):
    """Closed set of failure kinds. ``INTERNAL`` is the fallback for anything unrecognized."""
    VALIDATION = (400, "Invalid request.")
    CONFLICT = (409, "Resource already exists.")
    NOT_FOUND = (404, "Resource not found.")
    INTERNAL = (500, "Something went wrong.")

    def __init__(self, status: int, default_message: str):
        self.status = status
        self.default_message = default_message


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class AppError(Exception):
    """Expected, controlled failure carrying an HTTP status."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: Optional[str] = None, kind: Optional[ErrorKind] = None):
        if kind is not None:
            self.kind = kind
        self.message = message or self.kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


@dataclass(frozen=True)
class ErrorInfo:
    status: int
    message: str


def describe_error(exc: BaseException) -> ErrorInfo:
    """Resolve any exception to the status and message sent to the client."""
    if isinstance(exc, AppError):
        return ErrorInfo(exc.status_code, exc.message)
    if isinstance(exc, HTTPException) and exc.code is not None:
        return ErrorInfo(exc.code, exc.description or exc.name)
    return ErrorInfo(ErrorKind.INTERNAL.status, ErrorKind.INTERNAL.default_message)
