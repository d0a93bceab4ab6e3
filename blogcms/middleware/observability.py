from __future__ import annotations

import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from blogcms.core.logging import bind_request_id, get_logger, reset_request_id
from blogcms.core.metrics import normalize_path, record_request_metrics

REQUEST_ID_HEADER = "X-Request-ID"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Request latency metrics, a request id echoed back, and logs for failed requests."""

    def __init__(self, app, *, log_4xx: bool = True) -> None:
        super().__init__(app)
        self.logger = get_logger("blogcms.requests")
        self.log_4xx = log_4xx

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_id(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - start
            record_request_metrics(request, 500, elapsed)
            self.logger.exception("Unhandled server error", extra=self._context(request, request_id, 500, elapsed))
            raise
        finally:
            reset_request_id(token)

        elapsed = time.perf_counter() - start
        record_request_metrics(request, response.status_code, elapsed)
        response.headers[REQUEST_ID_HEADER] = request_id

        if response.status_code >= 500:
            self.logger.error("Server error response", extra=self._context(request, request_id, response.status_code, elapsed))
        elif response.status_code >= 400 and self.log_4xx:
            self.logger.warning("Client error response", extra=self._context(request, request_id, response.status_code, elapsed))
        return response

    @staticmethod
    def _context(request: Request, request_id: str, status_code: int, elapsed: float) -> dict[str, Any]:
        forwarded = request.headers.get("x-forwarded-for")
        client_ip = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else None)
        return {
            "method": request.method,
            "path": normalize_path(request),
            "status_code": status_code,
            "duration_ms": round(elapsed * 1000, 3),
            "client_ip": client_ip,
            "request_id": request_id,
        }
