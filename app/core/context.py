"""Per-request context: request id, timing, caller headers, and the standard response headers."""

import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.config import get_settings
from app.core.logging import request_id_var
from app.schemas.envelope import utc_timestamp
from app.services.event_bus import EventType, event_bus

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


@dataclass
class RequestContext:
    """What the server knows about the request being handled."""

    request_id: str
    method: str
    path: str
    timestamp: str = field(default_factory=utc_timestamp)
    user_agent: str | None = None
    ip: str = "unknown"
    # Lifted from X-User-ID / X-User-Role; a stand-in for real auth propagation.
    user_id: str | None = None
    role: str | None = None


def generate_request_id() -> str:
    """req_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Attach a RequestContext to every request and time it.

    - Uses X-Request-ID from the caller or generates one
    - Stores the context in request.state.context and the id in the logging context var
    - Logs start and completion; emits api.request / api.response
    - Adds X-Request-ID, X-Response-Time, X-API-Version and X-Server-Time to the response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        context = RequestContext(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            user_agent=request.headers.get("User-Agent"),
            ip=request.client.host if request.client else "unknown",
            user_id=request.headers.get("X-User-ID"),
            role=request.headers.get("X-User-Role"),
        )
        request.state.context = context
        token = request_id_var.set(request_id)
        start = time.perf_counter()
        try:
            logger.info(
                "Request started: %s %s",
                context.method,
                context.path,
                extra={"operation": "request_start"},
            )
            event_bus.emit(
                EventType.API_REQUEST,
                {"method": context.method, "path": context.path},
                context,
            )
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.error(
                    "Request failed: %s %s after %dms",
                    context.method,
                    context.path,
                    duration_ms,
                    extra={"operation": "request_error"},
                )
                raise

            duration_ms = int((time.perf_counter() - start) * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            response.headers["X-API-Version"] = get_settings().API_VERSION
            response.headers["X-Server-Time"] = utc_timestamp()
            logger.info(
                "Request completed: %s %s %d in %dms",
                context.method,
                context.path,
                response.status_code,
                duration_ms,
                extra={"operation": "request_complete", "duration": duration_ms},
            )
            event_bus.emit(
                EventType.API_RESPONSE,
                {"statusCode": response.status_code, "duration": duration_ms},
                context,
            )
            return response
        finally:
            request_id_var.reset(token)


def get_request_context(request: Request) -> RequestContext:
    """Dependency: the context set by RequestContextMiddleware (a bare one if it did not run)."""
    context = getattr(request.state, "context", None)
    if context is None:
        context = RequestContext(
            request_id=request.headers.get("X-Request-ID") or generate_request_id(),
            method=request.method,
            path=request.url.path,
        )
        request.state.context = context
    return context


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
