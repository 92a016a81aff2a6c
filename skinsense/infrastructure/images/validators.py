"""Guards for images selected for analysis."""
from typing import Tuple


ACCEPTED_TYPES = ("image/jpeg", "image/png", "image/jpg")
ACCEPTED_EXTENSIONS = ("jpg", "jpeg", "png")
MAX_SIZE = 10 * 1024 * 1024


def validate_image_type(content_type: str) -> Tuple[bool, str]:
    """
    Validate the MIME type of an uploaded image.

    Args:
        content_type: MIME type reported by the uploader

    Returns:
        Tuple of (is_valid, error_message)
    """
    if (content_type or "").strip().lower() not in ACCEPTED_TYPES:
        return False, "Invalid file type. Please upload a JPG or PNG image."
    return True, ""


def validate_image_size(size: int) -> Tuple[bool, str]:
    """
    Validate the size of an uploaded image in bytes.

    Args:
        size: File size in bytes

    Returns:
        Tuple of (is_valid, error_message)
    """
    if size <= 0:
        return False, "The selected file is empty."
    if size > MAX_SIZE:
        return False, "File too large. Maximum size is 10MB."
    return True, ""


def validate_image(content_type: str, size: int) -> Tuple[bool, str]:
    is_valid, error = validate_image_type(content_type)
    if not is_valid:
        return is_valid, error
    return validate_image_size(size)
