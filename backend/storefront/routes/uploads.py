"""
Storefront Gateway: Image Upload Route
=========================================

What:  POST /api/upload-image, multipart/form-data with one file field "image".
How:   Reads the file, hands it to MediaService (format check + Cloudinary
       upload) and returns the public URL.

The form is read by hand instead of through File(): a text value in the
"image" field, or a body that is not multipart at all, counts as "no file"
and gets the same 400 as a missing field.

Error responses (handled by global exception handlers):
    HTTP 400: No file, empty file, or a format outside jpeg/png/jpg/webp
    HTTP 500: Cloudinary failure (MediaStorageError)
"""

import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from storefront.context import GatewayContext, get_context
from storefront.exceptions import ValidationError
from storefront.schemas.api import ErrorResponse, ImageUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Uploads"])

IMAGE_FIELD = "image"


@router.post(
    "/upload-image",
    response_model=ImageUploadResponse,
    responses={
        400: {"description": "Missing file or unsupported format", "model": ErrorResponse},
        500: {"description": "Media storage error", "model": ErrorResponse},
    },
    summary="Upload a product image",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            IMAGE_FIELD: {
                                "type": "string",
                                "format": "binary",
                                "description": "Product image (jpeg, jpg, png or webp)",
                            }
                        },
                        "required": [IMAGE_FIELD],
                    }
                }
            },
        }
    },
)
async def upload_image(
    request: Request,
    context: GatewayContext = Depends(get_context),
) -> ImageUploadResponse:
    form = await request.form()
    image = form.get(IMAGE_FIELD)
    if not isinstance(image, UploadFile):
        raise ValidationError(message="No image file uploaded.", field=IMAGE_FIELD)

    try:
        content = await image.read()
        logger.info(
            "Received image upload: filename=%s, size=%d bytes",
            image.filename or "unknown",
            len(content),
        )
        image_url = await context.media.upload_image(
            content,
            filename=image.filename,
            content_type=image.content_type,
        )
    finally:
        await form.close()

    return ImageUploadResponse(imageUrl=image_url)
