"""
Health check endpoint.

Endpoints:
    GET /health  — liveness probe with timestamp and process uptime
"""

import time
from datetime import datetime, timezone

import psutil
from fastapi import APIRouter

from microservice.models.health import ErrorResponse, HealthResponse

router = APIRouter(tags=["Health"])

_PROCESS_STARTED_AT = psutil.Process().create_time()


def process_uptime() -> float:
    """Seconds elapsed since this process was started."""
    return max(time.time() - _PROCESS_STARTED_AT, 0.0)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        429: {"model": ErrorResponse, "description": "Rate limit exceeded."},
        503: {"model": ErrorResponse, "description": "Service under resource pressure."},
    },
    summary="Health check",
    description="Health check endpoint",
)
async def health_check() -> HealthResponse:
    """Simple liveness probe."""
    return HealthResponse(status="ok", timestamp=utc_timestamp(), uptime=process_uptime())
