"""
Storefront Gateway: Collaborator Context
===========================================

What:  Holds the collaborator handles (database, media, optional payments).
Why:   Handles are created once at startup and shared by every request.
       Keeping them on an explicit object (app.state.context) instead of
       module globals lets tests inject doubles through create_app().
How:   Route handlers receive the context through FastAPI's Depends().
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from storefront.config import Settings
from storefront.exceptions import NotFoundError
from storefront.services.media_service import MediaService
from storefront.services.payment_service import PaymentService
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)


class GatewayContext:
    """
    Process-wide collaborator handles.

    Read-only after startup; safe for concurrent use by in-flight requests.
    `payments` is None when Razorpay is not configured.
    """

    def __init__(
        self,
        products: ProductService,
        media: MediaService,
        payments: Optional[PaymentService] = None,
    ):
        self.products = products
        self.media = media
        self.payments = payments

    @property
    def payments_enabled(self) -> bool:
        return self.payments is not None


def build_context(settings: Settings) -> GatewayContext:
    """
    Initialize all collaborators from settings.

    Raises:
        ConfigurationError: The Firebase credential document is unusable.
    """
    products = ProductService.from_settings(settings)
    media = MediaService.from_settings(settings)
    payments = PaymentService.from_settings(settings)
    return GatewayContext(products=products, media=media, payments=payments)


# ── FastAPI Dependencies ──────────────────────────────────────────────────

def get_context(request: Request) -> GatewayContext:
    return request.app.state.context


def require_payments(context: GatewayContext = Depends(get_context)) -> PaymentService:
    """
    Gate for the payment route.

    The route is always mounted; when payments are disabled this dependency
    answers 404 before the request body is validated.
    """
    if context.payments is None:
        raise NotFoundError(resource="endpoint")
    return context.payments
