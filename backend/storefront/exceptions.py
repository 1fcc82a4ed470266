"""
Storefront Gateway: Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for each failure the gateway can hit.
Why:   Collaborator SDKs raise their own error types. Translating them into one
       hierarchy lets the global handlers in main.py pick the HTTP status and
       keep SDK details out of the response body.
How:   Each exception carries a user-safe message and an optional context dict
       that is logged server-side only.

Exception Hierarchy:
    StorefrontError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── CollaboratorError        → 500 Internal Server Error
    │   ├── DatabaseError            (Firestore)
    │   ├── MediaStorageError        (Cloudinary)
    │   └── PaymentGatewayError      (Razorpay)
    └── ConfigurationError       → startup aborts
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """
    Raised when client input is unusable.

    When:    No file in the "image" field, or an image encoding outside the
             allow-list.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(StorefrontError):
    """
    Raised when a requested resource does not exist.

    When:    Updating a product id that is not in the collection, or calling
             the payment route while payments are not configured.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class CollaboratorError(StorefrontError):
    """
    Raised when an external managed service call fails.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The SDK error
        text goes into `context` and is logged by the exception handler.
    """

    default_message = "An external service error occurred. Please try again later."

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message or self.default_message, context=context)


class DatabaseError(CollaboratorError):
    """Firestore read, write or delete failed."""

    default_message = "A database error occurred. Please try again later."


class MediaStorageError(CollaboratorError):
    """Cloudinary rejected or failed the upload."""

    default_message = "Failed to upload image. Please try again."


class PaymentGatewayError(CollaboratorError):
    """Razorpay could not create the order."""

    default_message = "Error creating payment order"


class ConfigurationError(StorefrontError):
    """
    Raised at startup when a required collaborator cannot be initialized.

    What:    The credential document is missing or unparseable.
    Effect:  The lifespan re-raises it, so uvicorn never starts serving.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
