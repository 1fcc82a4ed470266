"""
Storefront Gateway: Request/Response Schemas
===============================================

What:  Pydantic models for the parts of the API that have a fixed shape.
Why:   Product records are schema-less (plain dicts end to end), but the
       upload response, the order request and error bodies have a contract
       the frontend relies on.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """Returned by POST /api/upload-image."""
    imageUrl: str = Field(description="Public HTTPS URL of the stored image")


class OrderRequest(BaseModel):
    """
    Body of POST /api/create-order.

    Why Decimal: the amount is converted to minor units with half-up rounding,
    which must not be disturbed by binary float error.
    """
    amount: Decimal = Field(gt=0, description="Order total in major currency units (e.g. rupees)")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for every handled failure.

    Example:
        {
            "error": "validation_error",
            "message": "No image file uploaded.",
            "details": {"field": "image"},
            "request_id": "3f2a9c1b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'healthy' once startup completed")
    version: str = Field(description="Application version")
    payments_enabled: bool = Field(description="Whether /api/create-order is available")
    uptime_seconds: float = Field(description="Seconds since service started")
