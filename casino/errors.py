"""Domain errors and the JSON error envelope they are rendered into."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CasinoError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(CasinoError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ValidationFailedError(CasinoError):
    """Raised when a payload is missing fields or carries malformed values."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(
        self, message: str | None = None, errors: list[dict[str, str]] | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class InvalidArgumentError(ValidationFailedError):
    default_message = "Invalid argument"


class UnauthorizedError(CasinoError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied. Please login first."


class ForbiddenError(CasinoError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class ConflictError(CasinoError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


def error_payload(message: str, errors: list[dict[str, Any]] | None = None) -> dict:
    payload: dict[str, Any] = {"status": "error", "message": message}
    if errors:
        payload["errors"] = errors
    return payload


async def casino_error_handler(request: Request, exc: CasinoError) -> JSONResponse:
    errors = getattr(exc, "errors", None)
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(error_payload(exc.message, errors), status_code=exc.status_code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query" prefix FastAPI adds to locations
        location = [str(part) for part in err["loc"]]
        field = ".".join(location[1:]) or location[0]
        errors.append({"field": field, "message": err["msg"]})
    return JSONResponse(
        error_payload("Validation failed", errors),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        error_payload(str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        error_payload("Rate limit exceeded. Please retry shortly."),
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        error_payload(CasinoError.default_message),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CasinoError, casino_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
