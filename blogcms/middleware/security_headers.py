from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from blogcms.core.config import settings

# Swagger UI y ReDoc cargan scripts externos; la CSP estricta las rompe.
_DOCS_PATHS = ("/docs", "/redoc")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Security headers on every response, plus no-store for authenticated calls."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        headers = {
            "Strict-Transport-Security": settings.STRICT_TRANSPORT_SECURITY,
            "X-Frame-Options": settings.X_FRAME_OPTIONS,
            "X-Content-Type-Options": settings.X_CONTENT_TYPE_OPTIONS,
            "Referrer-Policy": settings.REFERRER_POLICY,
        }
        if not request.url.path.startswith(_DOCS_PATHS):
            headers["Content-Security-Policy"] = settings.CONTENT_SECURITY_POLICY
        if "authorization" in request.headers or "x-api-key" in request.headers:
            headers["Cache-Control"] = "no-store"

        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
