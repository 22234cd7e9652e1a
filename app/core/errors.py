"""API error types and the handlers that turn them into envelope responses."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.envelope import ApiResponse, FieldError, utc_timestamp
from app.services.event_bus import EventType, event_bus

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "Validation error"
RESOURCE_NOT_FOUND = "Resource not found"
ROUTE_NOT_FOUND = "Route not found"
INTERNAL_ERROR = "Internal server error"


class ApiError(Exception):
    """Raised by routes and services for an expected, client-visible failure."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class NotFoundError(ApiError):
    """Raised when a resource id does not exist in the in-memory store."""

    def __init__(self, message: str = RESOURCE_NOT_FOUND) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, message)


def _request_id(request: Request) -> str:
    context = getattr(request.state, "context", None)
    return context.request_id if context is not None else "unknown"


def error_response(
    request: Request,
    status_code: int,
    error: str,
    details: list[FieldError] | None = None,
) -> JSONResponse:
    """Build a failure envelope; X-Request-ID is set here for handlers outside the middleware."""
    request_id = _request_id(request)
    body = ApiResponse[Any](
        success=False,
        error=error,
        details=details,
        timestamp=utc_timestamp(),
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers={"X-Request-ID": request_id},
    )


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        details.append(
            FieldError(
                field=".".join(loc) or "unknown",
                message=err.get("msg", "Invalid value"),
                value=err.get("input"),
            )
        )
    return details


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(request, exc.status_code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with one entry per invalid field (query.page, body.email, ...)."""
    details = _field_errors(exc)
    logger.warning(
        "Validation failed: %s %s (%d errors)",
        request.method,
        request.url.path,
        len(details),
        extra={"operation": "validation"},
    )
    return error_response(request, status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR, details)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown routes become 'Route not found'; other HTTP errors keep their detail."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = ROUTE_NOT_FOUND
    else:
        message = str(exc.detail)
    return error_response(request, exc.status_code, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log with stack trace and answer 500 without leaking the exception text."""
    context = getattr(request.state, "context", None)
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"operation": "unhandled_error"},
    )
    event_bus.emit(
        EventType.ERROR_OCCURRED,
        {"message": str(exc), "errorType": type(exc).__name__},
        context,
    )
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
