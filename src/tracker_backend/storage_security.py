"""
Validation and naming for uploaded images.
"""
import mimetypes
import re
import logging
from typing import Optional, Tuple

from .storage_config import (
    MAX_IMAGE_UPLOAD_SIZE,
    IMAGE_CONTENT_TYPE_PREFIX,
    DEFAULT_FILE_EXTENSION,
    format_bytes
)
from .api.exceptions import BadRequestException

logger = logging.getLogger(__name__)

_SEGMENT_PATTERN = re.compile(r'^[\w-]+$')


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal and other security issues.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    if not filename or not filename.strip():
        return "unnamed_file"

    # Split on both / and \ to get the final component
    filename = filename.replace('\\', '/').split('/')[-1]

    if not filename:
        return "unnamed_file"

    # Prevent hidden files
    if filename.startswith('.'):
        filename = '_' + filename.lstrip('.')

    # Allow: alphanumeric, spaces, dots, hyphens, underscores
    filename = re.sub(r'[^\w\s.-]', '', filename, flags=re.UNICODE)
    filename = re.sub(r'\s+', '_', filename)
    filename = filename.strip('. ')

    name_parts = filename.rsplit('.', 1)
    if len(name_parts) == 2:
        name, ext = name_parts
        if len(name) > 100:
            name = name[:100]
        filename = f"{name}.{ext}"
    elif len(filename) > 100:
        filename = filename[:100]

    if not filename or filename.strip('_') == '':
        filename = "unnamed_file"

    return filename


def file_extension(filename: str) -> str:
    """Text after the last dot, or 'bin' when the name has none."""
    if '.' not in filename:
        return DEFAULT_FILE_EXTENSION
    ext = filename.rsplit('.', 1)[1].lower()
    return ext or DEFAULT_FILE_EXTENSION


def guess_content_type(filename: str, content_type: Optional[str]) -> str:
    if content_type and content_type != 'application/octet-stream':
        return content_type
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or content_type or 'application/octet-stream'


def validate_image_size(file_size: int) -> Tuple[bool, Optional[str]]:
    if file_size == 0:
        return False, "No file was uploaded"

    if file_size > MAX_IMAGE_UPLOAD_SIZE:
        return False, f"File size {format_bytes(file_size)} exceeds maximum allowed size of {format_bytes(MAX_IMAGE_UPLOAD_SIZE)}"

    return True, None


def validate_image_content_type(content_type: str) -> Tuple[bool, Optional[str]]:
    # Normalize content type (remove parameters like charset)
    content_type = content_type.split(';')[0].strip().lower()

    if not content_type.startswith(IMAGE_CONTENT_TYPE_PREFIX):
        return False, f"Content type '{content_type}' is not an image"

    return True, None


def validate_path_segment(segment: str, label: str) -> None:
    """Folder and custom names become part of the object key."""
    if not _SEGMENT_PATTERN.match(segment):
        raise BadRequestException(f"Invalid {label}: only letters, digits, '_' and '-' are allowed")


def perform_image_validation(content_type: str, file_size: int) -> None:
    """
    Raise BadRequestException when the upload is empty, too large or not an image.
    """
    valid, error = validate_image_size(file_size)
    if not valid:
        raise BadRequestException(error)

    valid, error = validate_image_content_type(content_type)
    if not valid:
        raise BadRequestException(error)
