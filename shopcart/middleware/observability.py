from __future__ import annotations

import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shopcart.core.logging import get_logger
from shopcart.core.metrics import normalize_path, record_request_metrics
from shopcart.services.session_binding import CART_ID_KEY


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Record request metrics and log failed requests with the caller's cart."""

    def __init__(self, app, *, log_4xx: bool = True) -> None:
        super().__init__(app)
        self.logger = get_logger("shopcart.requests")
        self.log_4xx = log_4xx

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            record_request_metrics(request, 500, duration)
            self.logger.exception("Unhandled server error", extra=self._context(request, 500, duration))
            raise

        duration = time.perf_counter() - start
        status_code = response.status_code
        record_request_metrics(request, status_code, duration)

        if status_code >= 500:
            self.logger.error("Server error response", extra=self._context(request, status_code, duration))
        elif status_code >= 400 and self.log_4xx:
            self.logger.warning("Client error response", extra=self._context(request, status_code, duration))

        return response

    @staticmethod
    def _context(request: Request, status_code: int, duration: float) -> dict[str, Any]:
        # SessionMiddleware sits outside this one, so the session is already decoded.
        session = request.scope.get("session") or {}
        return {
            "method": request.method,
            "path": normalize_path(request),
            "status_code": status_code,
            "duration_ms": round(duration * 1000, 3),
            "cart_id": session.get(CART_ID_KEY),
            "request_id": request.headers.get("x-request-id"),
        }
