"""
Tests for upload validators.
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from core.exceptions import ValidationError
from media.validators import MAX_IMAGE_SIZE_BYTES, MAX_UPLOAD_SIZE_BYTES, validate_image, validate_upload


def _file(name, content_type, size=16):
    return SimpleUploadedFile(name, b"x" * size, content_type=content_type)


class TestValidateUpload:
    def test_accepts_pdf(self, pdf_file):
        """
        A PDF within the limit passes through unchanged.

        Why it matters: Certificates are usually PDFs.
        """
        assert validate_upload(pdf_file) is pdf_file

    def test_missing_file(self):
        """
        No file raises NO_FILE.

        Why it matters: A multipart form without the field must be a 400, not a 500.
        """
        with pytest.raises(ValidationError) as exc_info:
            validate_upload(None)

        assert exc_info.value.error_code == "NO_FILE"

    def test_rejects_disallowed_type(self):
        """
        Executables are rejected with the offending type in details.

        Why it matters: Only images and documents may be stored.
        """
        with pytest.raises(ValidationError) as exc_info:
            validate_upload(_file("run.exe", "application/x-msdownload"))

        assert exc_info.value.error_code == "FILE_TYPE_NOT_ALLOWED"
        assert exc_info.value.details["content_type"] == "application/x-msdownload"

    def test_content_type_is_case_insensitive(self):
        """
        Why it matters: Some clients send IMAGE/PNG.
        """
        upload = _file("a.png", "IMAGE/PNG")
        assert validate_upload(upload) is upload

    def test_size_limit_is_inclusive(self):
        """
        Exactly 10MB is allowed; one byte more is not.

        Why it matters: The limit is "at most", users right at the edge must not be rejected.
        """
        assert validate_upload(_file("big.pdf", "application/pdf", MAX_UPLOAD_SIZE_BYTES))

        with pytest.raises(ValidationError) as exc_info:
            validate_upload(_file("big.pdf", "application/pdf", MAX_UPLOAD_SIZE_BYTES + 1))

        assert exc_info.value.error_code == "FILE_TOO_LARGE"
        assert exc_info.value.details["max_size"] == MAX_UPLOAD_SIZE_BYTES


class TestValidateImage:
    def test_accepts_any_image_subtype(self):
        """
        Why it matters: Profile pictures may be formats outside the upload allowlist (e.g. AVIF).
        """
        upload = _file("me.avif", "image/avif")
        assert validate_image(upload) is upload

    def test_rejects_non_image(self, pdf_file):
        """
        Why it matters: A PDF must never become a profile picture.
        """
        with pytest.raises(ValidationError) as exc_info:
            validate_image(pdf_file)

        assert exc_info.value.error_code == "NOT_AN_IMAGE"

    def test_default_image_limit_is_5mb(self):
        """
        Why it matters: Images have a tighter limit than general uploads.
        """
        with pytest.raises(ValidationError) as exc_info:
            validate_image(_file("huge.png", "image/png", MAX_IMAGE_SIZE_BYTES + 1))

        assert exc_info.value.error_code == "FILE_TOO_LARGE"
