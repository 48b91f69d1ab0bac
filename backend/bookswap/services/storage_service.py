"""
Local image storage for book covers.

Uploaded files are written to UPLOAD_DIR and referenced as "/uploads/<name>".
Absolute URLs (externally hosted images) are stored verbatim and never
touched here.
"""
import logging
import os
import uuid
from typing import Optional
from fastapi import UploadFile
from bookswap.core.config import settings
from bookswap.core.errors import ValidationError
from bookswap.core.utils import is_absolute_url, normalize_image_path

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "/uploads/"


async def save_upload(file: UploadFile) -> str:
    """Validate and save an uploaded image, returning its stored reference."""
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError(f"Invalid file type: {file.content_type}")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError("Image is too large")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)

    # Generate unique filename
    file_ext = os.path.splitext(file.filename or "")[1].lower()
    unique_filename = f"{uuid.uuid4().hex}{file_ext}"
    file_path = os.path.join(settings.UPLOAD_DIR, unique_filename)

    with open(file_path, "wb") as buffer:
        buffer.write(content)

    return normalize_image_path(unique_filename)


def local_path(image: Optional[str]) -> Optional[str]:
    """Filesystem path of a stored local image, or None for URLs/empty refs."""
    if not image or is_absolute_url(image) or not image.startswith(UPLOAD_PREFIX):
        return None
    relative = image[len(UPLOAD_PREFIX):]
    # Stored names are flat; refuse anything that would escape UPLOAD_DIR
    if not relative or os.path.basename(relative) != relative:
        return None
    return os.path.join(settings.UPLOAD_DIR, relative)


def release_image(image: Optional[str]) -> None:
    """Remove a locally stored image. Missing files are ignored."""
    file_path = local_path(image)
    if not file_path:
        return
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
    except OSError as e:
        logger.warning(f"Could not remove image {file_path}: {e}")
