from __future__ import annotations

from typing import Callable

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from shopcart.core.config import settings
from shopcart.core.logging import get_logger

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class PayloadLimitMiddleware(BaseHTTPMiddleware):
    """Reject write requests whose declared or actual body exceeds the limit."""

    def __init__(self, app, max_bytes: int | None = None) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes or settings.MAX_REQUEST_SIZE_BYTES
        self.logger = get_logger("shopcart.request_limit")

    async def dispatch(self, request: Request, call_next: Callable):
        if request.method not in _BODY_METHODS:
            return await call_next(request)

        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            return self._reject(request, int(declared))

        # Starlette caches the body on the request, so the endpoint can read it again.
        body = await request.body()
        if len(body) > self.max_bytes:
            return self._reject(request, len(body))

        return await call_next(request)

    def _reject(self, request: Request, size: int) -> JSONResponse:
        self.logger.warning(
            "Rejected request exceeding payload limit",
            extra={"method": request.method, "path": request.url.path, "content_length": size},
        )
        return JSONResponse(
            {"detail": "Request payload too large."},
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
