"""
Upload validators.

Uploads are checked against the client-declared content type and size
before they reach object storage. Failures raise core ValidationError so
views and services surface them as 400 responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Collection

    from django.core.files.uploadedfile import UploadedFile


# =============================================================================
# Configuration
# =============================================================================

MAX_UPLOAD_SIZE_BYTES = 10 * 1024 * 1024
MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024

ALLOWED_UPLOAD_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)


def validate_upload(
    file: UploadedFile | None,
    allowed_types: Collection[str] | None = ALLOWED_UPLOAD_TYPES,
    max_size: int = MAX_UPLOAD_SIZE_BYTES,
) -> UploadedFile:
    """
    Validate an uploaded file's presence, content type and size.

    Args:
        file: The uploaded file (None when the form field was missing)
        allowed_types: Accepted content types; None accepts any
        max_size: Maximum size in bytes

    Raises:
        ValidationError: NO_FILE, FILE_TYPE_NOT_ALLOWED or FILE_TOO_LARGE
    """
    if file is None:
        raise ValidationError("No file provided", error_code="NO_FILE")

    content_type = (file.content_type or "").lower()
    if allowed_types is not None and content_type not in allowed_types:
        raise ValidationError(
            "File type not allowed",
            error_code="FILE_TYPE_NOT_ALLOWED",
            details={"content_type": content_type},
        )

    if file.size > max_size:
        raise ValidationError(
            f"File size must be at most {max_size // (1024 * 1024)}MB",
            error_code="FILE_TOO_LARGE",
            details={"size": file.size, "max_size": max_size},
        )
    return file


def validate_image(
    file: UploadedFile | None,
    max_size: int = MAX_IMAGE_SIZE_BYTES,
) -> UploadedFile:
    """
    Validate that an upload is an image within the size limit.

    Any ``image/*`` content type is accepted.

    Raises:
        ValidationError: NO_FILE, NOT_AN_IMAGE or FILE_TOO_LARGE
    """
    if file is None:
        raise ValidationError("No file provided", error_code="NO_FILE")
    if not (file.content_type or "").lower().startswith("image/"):
        raise ValidationError(
            "Only image files are allowed",
            error_code="NOT_AN_IMAGE",
        )
    return validate_upload(file, allowed_types=None, max_size=max_size)
