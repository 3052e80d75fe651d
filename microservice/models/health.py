"""
Pydantic models for the operational endpoints.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness payload returned by the health endpoint."""

    status: str = Field(default="ok", description="Always 'ok' while the process serves requests.")
    timestamp: str = Field(..., description="Current UTC time in ISO-8601 format.")
    uptime: float = Field(..., ge=0, description="Seconds since the process started.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "ok",
                    "timestamp": "2026-02-06T12:00:00.000Z",
                    "uptime": 42.17,
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(..., description="Human-readable error description.")
