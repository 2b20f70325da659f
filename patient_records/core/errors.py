"""Application error taxonomy mapped onto HTTP responses."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base class for errors that carry an HTTP status and a machine code."""

    status_code: int = 500
    code: str | None = None

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.code:
            body["code"] = self.code
        return body


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, details: Any | None = None) -> None:
        super().__init__(f"{resource} not found", details)
        self.resource = resource


class DatabaseError(AppError):
    """Raised when the storage layer fails underneath a service call."""

    status_code = 500
    code = "DATABASE_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message, details=str(cause) if cause is not None else None)
        self.__cause__ = cause


class MethodNotAllowedError(AppError):
    status_code = 405
    code = "METHOD_NOT_ALLOWED"


__all__ = [
    "AppError",
    "DatabaseError",
    "MethodNotAllowedError",
    "NotFoundError",
    "ValidationError",
]
