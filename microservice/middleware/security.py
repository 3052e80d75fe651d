"""Security headers middleware."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Swagger UI assets are served from this CDN by FastAPI's docs page
_DOCS_CDN = "https://cdn.jsdelivr.net"

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "base-uri 'self'",
        "font-src 'self' https: data:",
        "form-action 'self'",
        "frame-ancestors 'self'",
        f"img-src 'self' data: {_DOCS_CDN} https://fastapi.tiangolo.com",
        "object-src 'none'",
        f"script-src 'self' 'unsafe-inline' {_DOCS_CDN}",
        "script-src-attr 'none'",
        f"style-src 'self' https: 'unsafe-inline' {_DOCS_CDN}",
        "upgrade-insecure-requests",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add a conservative set of security headers to every response."""

    def __init__(self, app, headers: dict[str, str] | None = None):
        super().__init__(app)
        self.headers = SECURITY_HEADERS if headers is None else headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
