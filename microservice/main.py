"""
FastAPI application factory.

Builds the app from an already validated ``Settings``: configures
logging, lifespan events (pressure sampling), middleware and
documentation, routers, and a catch-all exception handler.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from microservice.config import Settings
from microservice.logging_config import configure_logging
from microservice.plugins import register_plugins
from microservice.routes.api import register_routes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown events."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting up (%s) …", settings.node_env)
    app.state.pressure_monitor.start()
    if settings.enable_metrics:
        logger.info("Metrics enabled at %s, but no exporter is mounted.", settings.metrics_path)
    logger.info("Application is ready.")

    yield

    # Shutdown
    logger.info("Shutting down …")
    await app.state.pressure_monitor.stop()
    logger.info("Shutdown complete.")


# ---------------------------------------------------------------------------
# Global exception handler
# ---------------------------------------------------------------------------

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler so unhandled errors return structured JSON."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred. Please try again later."},
    )


# ---------------------------------------------------------------------------
# FastAPI app instance
# ---------------------------------------------------------------------------

def create_app(settings: Settings) -> FastAPI:
    """Build a fully wired application for the given settings."""
    configure_logging(settings.log_level)

    # Stock docs routes are replaced by the ones register_plugins mounts
    app = FastAPI(
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_plugins(app, settings)
    register_routes(app)

    app.add_exception_handler(Exception, unhandled_exception_handler)

    return app
