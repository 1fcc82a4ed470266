"""
Storefront Gateway: Origin Policy Middleware
===============================================

What:  Rejects requests whose Origin header is not on the allow-list.
Why:   Only the storefront frontend should be able to drive the API from a
       browser. A rejected request must never reach a route handler, so no
       collaborator is called for it.
How:   `is_origin_allowed()` is a pure predicate; the middleware calls it and
       short-circuits with 403 before routing.

Policy options (from settings):
    allowed_origins:  Explicit origins; "*" allows every origin
    allow_no_origin:  Permit requests without an Origin header (curl, mobile
                      apps, server-to-server calls)

Permitted requests continue to Starlette's CORSMiddleware, which adds the
Access-Control-* headers and answers preflights.
"""

import logging
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from storefront.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

WILDCARD = "*"

REJECTED_MESSAGE = (
    "The CORS policy for this site does not allow access from the specified Origin."
)


def is_origin_allowed(
    origin: Optional[str],
    allowed_origins: Iterable[str],
    allow_no_origin: bool = True,
) -> bool:
    if not origin:
        return allow_no_origin
    allowed = set(allowed_origins)
    return WILDCARD in allowed or origin in allowed


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    """
    Enforces the origin allow-list ahead of every route.

    Excluded paths:
        - /health: probes from load balancers must always get through
    """

    EXCLUDED_PATHS = {"/health"}

    def __init__(
        self,
        app: ASGIApp,
        allowed_origins: Iterable[str] = (),
        allow_no_origin: bool = True,
    ):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)
        self.allow_no_origin = allow_no_origin

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        origin = request.headers.get("origin")
        if is_origin_allowed(origin, self.allowed_origins, self.allow_no_origin):
            return await call_next(request)

        rid = request_id_var.get("")
        logger.warning(
            "[%s] Rejected %s %s from origin %r",
            rid,
            request.method,
            request.url.path,
            origin,
        )
        return JSONResponse(
            status_code=403,
            content={
                "error": "origin_not_allowed",
                "message": REJECTED_MESSAGE,
                "request_id": rid,
            },
        )
