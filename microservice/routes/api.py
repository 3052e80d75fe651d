"""
Versioned API router.
"""

from fastapi import APIRouter, FastAPI

from microservice.routes.health import router as health_router

API_PREFIX = "/api/v1"

api_router = APIRouter()
api_router.include_router(health_router)


def register_routes(app: FastAPI) -> None:
    """Mount every API route under the version prefix."""
    app.include_router(api_router, prefix=API_PREFIX)
