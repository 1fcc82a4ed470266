"""
Storefront Gateway: Media Service Unit Tests
===============================================

What:  Format allow-list and Cloudinary upload wrapping.

Test Strategy:
    ✅ Allowed formats by extension (case-insensitive)
    ✅ Content type used only when there is no extension
    ✅ Rejected formats never reach Cloudinary
    ✅ Upload result → secure URL; SDK error → MediaStorageError
"""

from unittest.mock import patch

import pytest

from storefront.config import Settings
from storefront.exceptions import MediaStorageError, ValidationError
from storefront.services.media_service import MediaService


class TestFormatDetection:

    def setup_method(self):
        self.service = MediaService(folder="test-products")

    @pytest.mark.parametrize("filename", ["a.jpg", "a.jpeg", "a.png", "a.webp", "A.PNG", "b.JpEg"])
    def test_allowed_extensions(self, filename):
        self.service.detect_format(filename, None)

    @pytest.mark.parametrize("filename", ["a.gif", "a.bmp", "a.svg", "a.pdf", "malware.exe"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.detect_format(filename, "image/png")

    def test_content_type_fallback(self):
        assert self.service.detect_format("blob", "image/webp") == "webp"
        assert self.service.detect_format(None, "image/jpeg; charset=binary") == "jpeg"

    def test_no_extension_and_non_image_type(self):
        with pytest.raises(ValidationError):
            self.service.detect_format("blob", "application/octet-stream")

    def test_formats_from_settings(self):
        with patch("cloudinary.config") as mock_config:
            service = MediaService.from_settings(
                Settings(
                    cloudinary_cloud_name="demo",
                    cloudinary_api_key="key",
                    cloudinary_api_secret="secret",
                    allowed_image_formats="png, WEBP",
                )
            )

        assert service.allowed_formats == ["png", "webp"]
        assert service.folder == "hyjain-products"
        mock_config.assert_called_once_with(
            cloud_name="demo", api_key="key", api_secret="secret", secure=True
        )


class TestUpload:

    def setup_method(self):
        self.service = MediaService(folder="test-products")

    @pytest.mark.asyncio
    async def test_upload_returns_secure_url(self, sample_png_bytes):
        with patch(
            "cloudinary.uploader.upload",
            return_value={"secure_url": "https://cdn.example/x.png", "url": "http://cdn.example/x.png"},
        ) as mock_upload:
            url = await self.service.upload_image(sample_png_bytes, "x.png", "image/png")

        assert url == "https://cdn.example/x.png"
        args, kwargs = mock_upload.call_args
        assert args[0].read() == sample_png_bytes
        assert kwargs["resource_type"] == "image"

    @pytest.mark.asyncio
    async def test_empty_file_rejected(self):
        with patch("cloudinary.uploader.upload") as mock_upload:
            with pytest.raises(ValidationError, match="No image"):
                await self.service.upload_image(b"", "x.png", "image/png")
        mock_upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self, sample_png_bytes):
        with patch("cloudinary.uploader.upload", side_effect=RuntimeError("Invalid image file")):
            with pytest.raises(MediaStorageError) as exc_info:
                await self.service.upload_image(sample_png_bytes, "x.png", "image/png")

        assert exc_info.value.context["error"] == "Invalid image file"

    @pytest.mark.asyncio
    async def test_response_without_url(self, sample_png_bytes):
        with patch("cloudinary.uploader.upload", return_value={"public_id": "x"}):
            with pytest.raises(MediaStorageError):
                await self.service.upload_image(sample_png_bytes, "x.png", "image/png")
