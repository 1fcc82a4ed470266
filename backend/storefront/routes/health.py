"""
Storefront Gateway: Health Check Route
=========================================

What:  Liveness endpoint for the hosting platform's health probe.
How:   Reports version, uptime and whether the optional payment feature is
       enabled. Collaborators are not probed; each of them is a paid managed
       service and every probe would cost a call.
"""

import time

from fastapi import APIRouter, Depends

from storefront import __version__
from storefront.context import GatewayContext, get_context
from storefront.schemas.api import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(context: GatewayContext = Depends(get_context)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        payments_enabled=context.payments_enabled,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
