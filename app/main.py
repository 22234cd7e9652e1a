"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import router as v1_router
from app.api.v1.health import build_health
from app.core.config import settings
from app.core.context import RequestContextMiddleware
from app.core.errors import (
    ApiError,
    api_error_handler,
    http_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from app.core.logging import configure_logging
from app.schemas.health import HealthResponse
from app.services.event_bus import event_bus, register_logging_listeners

configure_logging(settings.LOG_LEVEL)
register_logging_listeners(event_bus)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Userdesk API",
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID", "X-User-ID", "X-User-Role"],
    expose_headers=["X-Request-ID", "X-Response-Time", "X-API-Version", "X-Server-Time"],
)
# Added last so it wraps CORS and sees every request first.
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

logger.info(
    "Userdesk API configured: env=%s prefix=%s",
    settings.APP_ENV,
    settings.API_V1_PREFIX,
)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Userdesk API", "docs": "/docs", "api": settings.API_V1_PREFIX}


@app.get("/health", response_model=HealthResponse, tags=["health"])
def health() -> HealthResponse:
    """Unversioned health check for load balancers."""
    return build_health()
