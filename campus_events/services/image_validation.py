"""Checks applied to uploaded images before they reach the blob store."""

import io
import os

from PIL import Image, UnidentifiedImageError

from ..config.uploads import (
    ALLOWED_CONTENT_TYPES,
    ALLOWED_EXTENSIONS,
    ALLOWED_IMAGE_FORMATS,
    MAX_IMAGE_BYTES,
)
from ..errors import InvalidUploadError
from ..schemas.event import ImageUpload


def validate_image(upload: ImageUpload) -> str:
    """
    Accept only JPEG, PNG or GIF images up to MAX_IMAGE_BYTES.

    The extension, the declared content type and the decoded file header must
    all agree that this is an accepted image.

    Returns:
        The detected image format (e.g. 'PNG')

    Raises:
        InvalidUploadError: If any check fails
    """
    if upload.size > MAX_IMAGE_BYTES:
        raise InvalidUploadError(
            f"Image is too large: {upload.size} bytes (max {MAX_IMAGE_BYTES})"
        )
    if upload.size == 0:
        raise InvalidUploadError("Image file is empty")

    extension = os.path.splitext(upload.filename or '')[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise InvalidUploadError("Only image files are allowed!")

    content_type = (upload.content_type or '').split(';')[0].strip().lower()
    if content_type and content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError("Only image files are allowed!")

    try:
        with Image.open(io.BytesIO(upload.data)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise InvalidUploadError("Only image files are allowed!") from e

    if image_format not in ALLOWED_IMAGE_FORMATS:
        raise InvalidUploadError("Only image files are allowed!")

    return image_format
