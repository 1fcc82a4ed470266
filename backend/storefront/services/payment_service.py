"""
Storefront Gateway: Payment Service (Razorpay adapter)
=========================================================

What:  Creates Razorpay orders for checkout.
Why:   The frontend needs an order id before opening the Razorpay widget.
How:   Converts the major-unit amount into minor units, attaches the fixed
       currency and a time-based receipt label, and relays Razorpay's order
       object unchanged.

Rounding:
    Amounts are handled as Decimal and rounded ROUND_HALF_UP to whole minor
    units, so 19.995 → 2000 and 10 → 1000. Floats are converted through
    str() first, which keeps their shortest decimal form (19.995, not
    19.99499999...).

Known limitation:
    Receipt labels have millisecond resolution; two orders created in the
    same millisecond share a receipt. Razorpay does not require receipts to
    be unique.
"""

import logging
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

import razorpay
from starlette.concurrency import run_in_threadpool

from storefront.config import Settings
from storefront.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

RECEIPT_PREFIX = "receipt_order_"


def to_minor_units(amount: Union[Decimal, float, int, str]) -> int:
    """Major units → integer minor units, rounded half-up."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def make_receipt(now_ms: Optional[int] = None) -> str:
    """`receipt_order_<epoch millis>`"""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{RECEIPT_PREFIX}{now_ms}"


class PaymentService:
    """
    Wraps a `razorpay.Client`.

    Only constructed when both key id and secret are configured; see
    `from_settings`.
    """

    def __init__(self, client: Any, currency: str = "INR"):
        self.client = client
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["PaymentService"]:
        """
        Build the service, or return None when the Razorpay keys are absent.

        None disables the payment route instead of failing every request.
        """
        if not settings.payments_enabled:
            logger.warning("Razorpay keys not found. Payment routes will be disabled.")
            return None

        client = razorpay.Client(auth=(settings.razorpay_key_id, settings.razorpay_key_secret))
        logger.info("Razorpay initialized successfully.")
        return cls(client=client, currency=settings.order_currency)

    def build_order_options(self, amount: Union[Decimal, float, int, str]) -> Dict[str, Any]:
        return {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "receipt": make_receipt(),
        }

    async def create_order(self, amount: Union[Decimal, float, int, str]) -> Dict[str, Any]:
        """
        Create an order for `amount` (major units) and return Razorpay's
        response verbatim.

        Raises:
            PaymentGatewayError: Razorpay returned an error or was unreachable.
        """
        options = self.build_order_options(amount)

        try:
            # razorpay-python is synchronous (requests); keep it off the loop
            order = await run_in_threadpool(self.client.order.create, data=options)
        except Exception as e:
            logger.error("Razorpay Error: %s", str(e))
            raise PaymentGatewayError(
                context={"receipt": options["receipt"], "error": str(e)}
            ) from e

        logger.info(
            "Razorpay order created: %s (%d %s, %s)",
            order.get("id", "?"),
            options["amount"],
            options["currency"],
            options["receipt"],
        )
        return order
