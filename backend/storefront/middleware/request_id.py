"""
Storefront Gateway: Request ID Middleware
============================================

What:  Gives every request a correlation id and echoes it in X-Request-ID.
Why:   Error bodies carry the same id, so a client report can be matched to
       the server-side log lines for that request.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests share a thread but not this value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Uses the client's X-Request-ID when present, otherwise a short UUID.

    The id is stored in `request_id_var` (for loggers and exception handlers)
    and in `request.state.request_id` (for route handlers).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
