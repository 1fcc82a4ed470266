"""
Storefront Gateway: Product Route Handlers
=============================================

What:  CRUD endpoints over the Firestore products collection.
How:   Bodies are arbitrary JSON objects; they go to ProductService untouched.

Response semantics:
    POST and PUT echo the submitted fields merged with the id. They do NOT
    re-read the document, so server-side values not in the request body are
    absent from the response.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from storefront.context import GatewayContext, get_context
from storefront.schemas.api import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Products"])


@router.get(
    "/products",
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all products",
)
async def list_products(
    context: GatewayContext = Depends(get_context),
) -> List[Dict[str, Any]]:
    return await context.products.list_products()


@router.post(
    "/products",
    status_code=201,
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="Create a product",
    description="Stores the request body as a new document and returns it with the assigned id.",
)
async def create_product(
    payload: Dict[str, Any] = Body(...),
    context: GatewayContext = Depends(get_context),
) -> Dict[str, Any]:
    return await context.products.create_product(payload)


@router.put(
    "/products/{product_id}",
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Update a product (partial merge)",
    description=(
        "Merges the request body into the stored document. Fields not sent keep "
        "their stored values. The response echoes the request body, not the merged document."
    ),
)
async def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    context: GatewayContext = Depends(get_context),
) -> Dict[str, Any]:
    return await context.products.update_product(product_id, payload)


@router.delete(
    "/products/{product_id}",
    response_model=MessageResponse,
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    context: GatewayContext = Depends(get_context),
) -> MessageResponse:
    await context.products.delete_product(product_id)
    return MessageResponse(message=f"Product {product_id} deleted.")
