"""
Storefront Gateway: Media Service (Cloudinary adapter)
=========================================================

What:  Validates an uploaded image's encoding and stores it on Cloudinary.
Why:   Product images are served from the CDN; the gateway only needs the
       public URL back.
How:   Two checks before anything leaves the process:
       1. Format check against the allow-list (extension, then content type)
       2. Empty-file check
       Cloudinary receives the same allow-list (`allowed_formats`) and checks
       the actual bytes on its side.

The Cloudinary SDK is blocking (requests-based), so the upload runs in the
Starlette threadpool.
"""

import io
import logging
from pathlib import Path
from typing import Iterable, Optional

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from storefront.config import Settings
from storefront.exceptions import MediaStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_FORMATS = ("jpeg", "png", "jpg", "webp")


class MediaService:
    """
    Uploads product images into a fixed Cloudinary folder.

    Attributes:
        folder:           Cloudinary folder every upload lands in
        allowed_formats:  Lower-case encodings accepted (no leading dot)
    """

    def __init__(self, folder: str, allowed_formats: Iterable[str] = ALLOWED_IMAGE_FORMATS):
        self.folder = folder
        self.allowed_formats = [fmt.lower() for fmt in allowed_formats]

    @classmethod
    def from_settings(cls, settings: Settings) -> "MediaService":
        """Configure the global Cloudinary SDK and return a service instance."""
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )
        logger.info(
            "Cloudinary configured (folder=%s, formats=%s)",
            settings.upload_folder,
            ",".join(settings.allowed_image_formats_list),
        )
        return cls(
            folder=settings.upload_folder,
            allowed_formats=settings.allowed_image_formats_list,
        )

    def detect_format(self, filename: Optional[str], content_type: Optional[str]) -> str:
        """
        Determine the image encoding of an upload.

        The filename extension wins when there is one; otherwise the subtype
        of an image/* content type is used.

        Raises:
            ValidationError: The encoding is not in the allow-list.
        """
        fmt = Path(filename or "").suffix.lower().lstrip(".")
        if not fmt and content_type and content_type.lower().startswith("image/"):
            fmt = content_type.split("/", 1)[1].split(";", 1)[0].strip().lower()

        if fmt not in self.allowed_formats:
            raise ValidationError(
                message=(
                    f"Image format '{fmt or 'unknown'}' is not supported. "
                    f"Allowed formats: {', '.join(self.allowed_formats)}"
                ),
                field="image",
                context={"format": fmt, "allowed": list(self.allowed_formats)},
            )
        return fmt

    async def upload_image(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload image bytes and return the public (https) URL.

        Raises:
            ValidationError:   Empty file or disallowed encoding (nothing uploaded)
            MediaStorageError: Cloudinary rejected or failed the upload
        """
        if not content:
            raise ValidationError(message="No image file uploaded.", field="image")

        fmt = self.detect_format(filename, content_type)

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(content),
                folder=self.folder,
                allowed_formats=self.allowed_formats,
                resource_type="image",
            )
        except Exception as e:
            logger.error("Cloudinary upload failed for %s: %s", filename or "upload", str(e))
            raise MediaStorageError(
                context={"filename": filename, "format": fmt, "error": str(e)}
            ) from e

        image_url = result.get("secure_url") or result.get("url")
        if not image_url:
            raise MediaStorageError(
                context={"filename": filename, "error": "upload response had no URL"}
            )

        logger.info(
            "Image uploaded: %s (%d bytes, %s)",
            result.get("public_id", "?"),
            len(content),
            fmt,
        )
        return image_url
