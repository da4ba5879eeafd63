"""
Fixtures for media tests.

The S3 client is always a MagicMock; nothing here talks to a bucket.
"""

from unittest.mock import MagicMock, patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from media.services import StorageService


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.return_value = "http://localhost:9000/uploads/signed?X-Amz-Signature=abc"
    return client


@pytest.fixture
def storage(s3_client):
    return StorageService(
        client=s3_client,
        bucket_name="uploads",
        endpoint="http://localhost:9000/",
        presigned_url_expiry=3600,
    )


@pytest.fixture
def patched_storage(storage):
    """Route the views' get_storage_service() to the mock-backed service."""
    with patch("media.views.get_storage_service", return_value=storage):
        yield storage


@pytest.fixture
def pdf_file():
    return SimpleUploadedFile("My CV.pdf", b"%PDF-1.4 resume", content_type="application/pdf")


@pytest.fixture
def png_file():
    return SimpleUploadedFile("avatar.png", b"\x89PNG\r\n\x1a\n" + b"0" * 64, content_type="image/png")


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def authenticated_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client
