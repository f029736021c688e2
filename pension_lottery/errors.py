"""Application errors rendered by the centralized handlers.

Each subclass fixes the machine-readable ``code`` and the HTTP status; callers
only supply a message and optional details.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class _DomainError(AppError):
    error_code: ClassVar[str]
    http_status: ClassVar[int]
    default_message: ClassVar[str]

    def __init__(self, message: str | None = None, details: Any | None = None) -> None:
        super().__init__(
            code=self.error_code,
            message=message or self.default_message,
            status_code=self.http_status,
            details=details,
        )


class ValidationError(_DomainError):
    """Request body or query string rejected."""

    error_code = "validation_error"
    http_status = 400
    default_message = "Validation error"


class ConflictError(_DomainError):
    """Round id already stored."""

    error_code = "conflict"
    http_status = 409
    default_message = "Conflict"


class RecordFormatError(_DomainError):
    """A stored row cannot be turned into a draw record."""

    error_code = "invalid_record"
    http_status = 422
    default_message = "Invalid draw record"


class StorageError(_DomainError):
    """The draw storage could not be read or written."""

    error_code = "storage_error"
    http_status = 503
    default_message = "Storage unavailable"
