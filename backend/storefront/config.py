"""
Storefront Gateway: Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types, and provides a singleton `settings` object.
Who:   Imported by main.py, context.py and the middleware.
When:  Loaded once at module import time; checked again in the lifespan.

Variable names match the deployment environment of the gateway:
    FIREBASE_DATABASE_URL, CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, PORT
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Payment credentials are optional. Everything else has a development
    default so the app can be imported (and tested) without a real project.
    """

    # ── Firebase / Firestore ──────────────────────────────────────────────
    # What: Service-account JSON used to authenticate the Admin SDK
    # Why a path: The credential document is supplied as a local file
    firebase_credentials_path: str = Field(default="serviceAccountKey.json")
    firebase_database_url: str = Field(default="")

    # Firestore collection holding the product documents
    products_collection: str = Field(default="products")

    # ── Cloudinary ────────────────────────────────────────────────────────
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # What: Target folder for every uploaded product image
    upload_folder: str = Field(default="hyjain-products")

    # What: Encodings accepted by /api/upload-image (comma separated)
    allowed_image_formats: str = Field(default="jpeg,png,jpg,webp")

    @property
    def allowed_image_formats_list(self) -> List[str]:
        return [
            fmt.strip().lower()
            for fmt in self.allowed_image_formats.split(",")
            if fmt.strip()
        ]

    # ── Razorpay (optional) ───────────────────────────────────────────────
    # What: Both values must be present for the payment route to exist
    razorpay_key_id: Optional[str] = Field(default=None)
    razorpay_key_secret: Optional[str] = Field(default=None)

    # What: ISO 4217 code sent with every order; amounts are in its minor unit
    order_currency: str = Field(default="INR")

    @property
    def payments_enabled(self) -> bool:
        """True only when both Razorpay credentials are non-empty."""
        return bool(self.razorpay_key_id and self.razorpay_key_secret)

    # ── Cross-Origin Policy ───────────────────────────────────────────────
    # What: Origins allowed to call the API; "*" allows any origin
    # Format: Comma-separated URLs (split by the property below)
    cors_allowed_origins: str = Field(default="https://ecomfrontend.onrender.com")

    # What: Permit requests without an Origin header (curl, mobile apps)
    cors_allow_no_origin: bool = Field(default=True)

    @property
    def cors_origins_list(self) -> List[str]:
        """
        What: Splits comma-separated origins into a list.
        Why property: Middleware expects a list, but env vars are strings.
        """
        return [
            origin.strip()
            for origin in self.cors_allowed_origins.split(",")
            if origin.strip()
        ]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_media_credentials(self) -> None:
        """
        What:  Checks that the Cloudinary credentials are configured.
        When:  Called during app startup (lifespan).
        Why:   Missing values only break uploads, so the lifespan logs the
               problem instead of refusing to start.
        """
        missing = [
            name
            for name, value in (
                ("CLOUDINARY_CLOUD_NAME", self.cloudinary_cloud_name),
                ("CLOUDINARY_API_KEY", self.cloudinary_api_key),
                ("CLOUDINARY_API_SECRET", self.cloudinary_api_secret),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                "Media storage is not configured:\n"
                + "\n".join(f"  - {name} is not set" for name in missing)
            )


# Singleton instance, imported throughout the application
settings = Settings()
