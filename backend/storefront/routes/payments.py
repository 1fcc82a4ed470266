"""
Storefront Gateway: Payment Route
====================================

What:  POST /api/create-order → Razorpay order for checkout.
Who:   Called by the frontend right before it opens the Razorpay widget.

Availability:
    Mounted unconditionally; `require_payments` answers 404 when the Razorpay
    keys were not configured at startup. The gate runs before the body is
    read, so a disabled gateway answers 404 for every method and payload.
    The body is parsed inside the handler for that reason.
"""

import json
from typing import Any, Dict

import pydantic
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError

from storefront.context import require_payments
from storefront.schemas.api import ErrorResponse, OrderRequest
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/api", tags=["Payments"])

OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


async def parse_order(request: Request) -> OrderRequest:
    """Decode and validate the body the way FastAPI would, answering 422 on failure."""
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body",),
                    "msg": "JSON decode error",
                    "input": {},
                    "ctx": {"error": str(e)},
                }
            ],
            body=body,
        ) from e

    try:
        return OrderRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = [
            {**error, "loc": ("body", *error["loc"])}
            for error in e.errors(include_url=False)
        ]
        raise RequestValidationError(errors, body=payload) from e



@router.post(
    "/create-order",
    responses={
        404: {"description": "Payments are not configured", "model": ErrorResponse},
        500: {"description": "Error creating payment order", "model": ErrorResponse},
    },
    summary="Create a payment order",
    description=(
        "Converts `amount` to minor units (half-up rounding), attaches the configured "
        "currency and a receipt label, and returns the gateway's order object verbatim."
    ),
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": OrderRequest.model_json_schema()}},
        }
    },
)
async def create_order(
    request: Request,
    payments: PaymentService = Depends(require_payments),
) -> Dict[str, Any]:
    order = await parse_order(request)
    return await payments.create_order(order.amount)


@router.api_route("/create-order", methods=OTHER_METHODS, include_in_schema=False)
async def create_order_wrong_method(
    payments: PaymentService = Depends(require_payments),
) -> None:
    raise HTTPException(status_code=405, detail="Method Not Allowed", headers={"Allow": "POST"})
