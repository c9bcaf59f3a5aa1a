"""Typed application errors and their HTTP rendering.

Services raise these; the handler registered in ``teamspace.main`` turns them
into ``{"detail": ..., "code": ...}`` JSON responses with the error's status.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error carrying an HTTP status and a machine-readable code."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class AuthorizationError(AppError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class RateLimitError(AppError):
    status_code = 429
    code = "RATE_LIMITED"


class EmailDeliveryError(AppError):
    """Raised when the SMTP transport rejects or cannot deliver a message."""

    status_code = 502
    code = "EMAIL_DELIVERY_FAILED"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as JSON."""
    if exc.status_code >= 500:
        logger.error("request_failed: %s %s code=%s", request.method, request.url.path, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures in the same shape as AppError."""
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={
            "detail": f"{location}: {message}" if location else message,
            "code": ValidationError.code,
            "errors": errors,
        },
    )
