"""Health check endpoint: status, uptime and environment."""

import time

from fastapi import APIRouter

from app.core.config import settings
from app.schemas.envelope import utc_timestamp
from app.schemas.health import HealthResponse

router = APIRouter()

# Monotonic reference for uptime; set when the module is first imported.
_STARTED_AT = time.monotonic()


def build_health() -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=utc_timestamp(),
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        environment=settings.APP_ENV,
        version=settings.API_VERSION,
    )


@router.get("", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """
    Return service status and uptime.
    Used by load balancers and monitoring.
    """
    return build_health()
