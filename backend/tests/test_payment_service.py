"""
Storefront Gateway: Payment Service Unit Tests
=================================================

What:  Minor-unit conversion, receipt labels and Razorpay wrapping.

Rounding rule pinned here: ROUND_HALF_UP on the decimal value.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from storefront.config import Settings
from storefront.exceptions import PaymentGatewayError
from storefront.services.payment_service import (
    PaymentService,
    make_receipt,
    to_minor_units,
)


class TestToMinorUnits:

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (19.995, 2000),
            (Decimal("19.995"), 2000),
            (Decimal("19.994"), 1999),
            (10, 1000),
            (0.1, 10),
            (1.005, 101),
            ("249.50", 24950),
        ],
    )
    def test_half_up(self, amount, expected):
        assert to_minor_units(amount) == expected

    def test_float_error_does_not_leak(self):
        # 0.1 + 0.2 == 0.30000000000000004 as a float
        assert to_minor_units(0.1 + 0.2) == 30


class TestMakeReceipt:

    def test_format(self):
        assert make_receipt(1700000000123) == "receipt_order_1700000000123"

    def test_uses_current_millis(self):
        with patch("storefront.services.payment_service.time.time_ns", return_value=1_700_000_000_123_456_789):
            assert make_receipt() == "receipt_order_1700000000123"


class TestPaymentService:

    @pytest.mark.asyncio
    async def test_create_order_relays_response(self, razorpay_client):
        service = PaymentService(client=razorpay_client, currency="INR")

        order = await service.create_order(Decimal("499"))

        assert order["id"] == "order_TEST123"
        assert order["amount"] == 49900
        _, kwargs = razorpay_client.order.create.call_args
        assert kwargs["data"]["currency"] == "INR"
        assert kwargs["data"]["receipt"].startswith("receipt_order_")

    @pytest.mark.asyncio
    async def test_currency_is_fixed_by_configuration(self, razorpay_client):
        service = PaymentService(client=razorpay_client, currency="USD")
        order = await service.create_order(1)
        assert order["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_gateway_error_wrapped(self):
        client = MagicMock()
        client.order.create.side_effect = RuntimeError("BAD_REQUEST_ERROR")
        service = PaymentService(client=client)

        with pytest.raises(PaymentGatewayError) as exc_info:
            await service.create_order(10)

        assert exc_info.value.message == "Error creating payment order"
        assert "BAD_REQUEST_ERROR" in exc_info.value.context["error"]


class TestFromSettings:

    @pytest.mark.parametrize(
        "key_id, key_secret",
        [(None, None), ("rzp_test_x", None), (None, "secret"), ("", "secret")],
    )
    def test_disabled_without_both_keys(self, key_id, key_secret):
        settings = Settings(razorpay_key_id=key_id, razorpay_key_secret=key_secret)
        assert settings.payments_enabled is False
        assert PaymentService.from_settings(settings) is None

    def test_enabled_with_both_keys(self):
        settings = Settings(
            razorpay_key_id="rzp_test_x",
            razorpay_key_secret="secret",
            order_currency="INR",
        )
        with patch("storefront.services.payment_service.razorpay.Client") as mock_client:
            service = PaymentService.from_settings(settings)

        assert service is not None
        assert service.currency == "INR"
        mock_client.assert_called_once_with(auth=("rzp_test_x", "secret"))
