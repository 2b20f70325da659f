"""Translate exceptions into ``{error, details?, code?}`` JSON responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from patient_records.core.errors import (
    AppError,
    MethodNotAllowedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Request sections FastAPI prefixes onto error locations.
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``[{path, message}]``."""

    details: list[dict[str, str]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in _LOCATION_ROOTS:
            location = location[1:]
        details.append({"path": ".".join(location), "message": error.get("msg", "")})
    return details


def _respond(error: AppError, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code, content=error.to_dict(), headers=headers
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "application error",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "code": exc.code,
            "error": exc.message,
        },
    )
    return _respond(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError("Validation failed", validation_details(exc))
    return await app_error_handler(request, error)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error: AppError
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error = MethodNotAllowedError("Method not allowed")
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        error = NotFoundError("Resource")
    else:
        error = AppError(str(exc.detail))
        error.status_code = exc.status_code
    return _respond(error, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected error", extra={"path": request.url.path})
    content: dict[str, Any] = {
        "error": "An unexpected error occurred",
        "details": str(exc),
    }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
