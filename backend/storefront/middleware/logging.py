"""
Storefront Gateway: Request Logging Middleware
=================================================

What:  One access-log line per request: method, path, status, duration,
       request id and client IP.
Why:   Every route is a single collaborator call, so request duration is
       effectively collaborator latency; this is the main signal for a slow
       Firestore, Cloudinary or Razorpay.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged (product payloads and amounts are client data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from storefront.middleware.request_id import request_id_var

logger = logging.getLogger("storefront.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logging; /health is skipped to keep probe noise out.

    A request whose handler raises is logged as 500 before the exception
    propagates to the server error handler.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._log(request, status, (time.perf_counter() - started) * 1000)

    @staticmethod
    def _log(request: Request, status: int, duration_ms: float) -> None:
        rid = request_id_var.get("")
        fields = {
            "request_id": rid,
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
            "origin": request.headers.get("origin"),
        }
        logger.log(
            level_for_status(status),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] "
            "from %(client_ip)s origin=%(origin)s",
            fields,
            extra=fields,
        )
