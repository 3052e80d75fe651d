"""
Cross-cutting middleware and API documentation wiring.

Request order, outermost first: security headers, CORS, rate limiting,
load shedding. Starlette runs the most recently added middleware first,
so they are added in reverse.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from microservice.config import Settings
from microservice.middleware.pressure import PressureMonitor, UnderPressureMiddleware
from microservice.middleware.rate_limit import RateLimitMiddleware
from microservice.middleware.security import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

DOCS_PATH = "/docs"
OPENAPI_PATH = "/docs/json"

API_TITLE = "Microservice API"
API_DESCRIPTION = "API documentation for microservice"
API_VERSION = "1.0.0"
API_SCHEMES = ("http", "https")

SWAGGER_UI_PARAMETERS = {
    "docExpansion": "full",
    "deepLinking": False,
}


def register_plugins(app: FastAPI, settings: Settings) -> None:
    """Attach middleware and documentation routes to ``app`` once."""
    if getattr(app.state, "plugins_registered", False):
        logger.warning("Plugins already registered on this application; skipping.")
        return

    monitor = PressureMonitor()
    app.state.pressure_monitor = monitor
    app.add_middleware(UnderPressureMiddleware, monitor=monitor)

    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max,
        window_ms=settings.rate_limit_window,
    )

    # Any origin while developing, none otherwise
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(SecurityHeadersMiddleware)

    register_docs(app, settings)

    app.state.plugins_registered = True
    logger.debug(
        "Plugins registered (env=%s, rate limit %d per %dms).",
        settings.node_env,
        settings.rate_limit_max,
        settings.rate_limit_window,
    )


def register_docs(app: FastAPI, settings: Settings) -> None:
    """Serve the OpenAPI document and a Swagger UI page."""
    app.title = API_TITLE
    app.description = API_DESCRIPTION
    app.version = API_VERSION
    app.servers = [
        {"url": f"{scheme}://{settings.host}:{settings.port}"} for scheme in API_SCHEMES
    ]

    @app.get(OPENAPI_PATH, include_in_schema=False)
    async def openapi_document() -> JSONResponse:
        return JSONResponse(app.openapi())

    @app.get(DOCS_PATH, include_in_schema=False)
    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(
            openapi_url=OPENAPI_PATH,
            title=f"{API_TITLE} - Docs",
            swagger_ui_parameters=SWAGGER_UI_PARAMETERS,
        )
