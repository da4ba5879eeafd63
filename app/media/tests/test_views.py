"""
Tests for the file endpoints.
"""

from botocore.exceptions import EndpointConnectionError
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status
from rest_framework.test import APIClient

BASE = "/api/v1/files/"


class TestFileUpload:
    def test_upload(self, authenticated_client, user, patched_storage, s3_client, pdf_file):
        """
        Why it matters: The response carries the key needed to delete or link the file later.
        """
        response = authenticated_client.post(f"{BASE}upload/", {"file": pdf_file}, format="multipart")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["key"].startswith(f"users/{user.id}/")
        assert response.data["original_name"] == "My CV.pdf"
        assert response.data["content_type"] == "application/pdf"
        s3_client.put_object.assert_called_once()

    def test_missing_file(self, authenticated_client, patched_storage):
        """
        Why it matters: Clients get a clear NO_FILE code.
        """
        response = authenticated_client.post(f"{BASE}upload/", {}, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["success"] is False
        assert response.data["error_code"] == "NO_FILE"

    def test_disallowed_type(self, authenticated_client, patched_storage, s3_client):
        """
        Why it matters: Rejected files never reach the bucket.
        """
        upload = SimpleUploadedFile("x.sh", b"#!/bin/sh", content_type="application/x-sh")

        response = authenticated_client.post(f"{BASE}upload/", {"file": upload}, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "FILE_TYPE_NOT_ALLOWED"
        s3_client.put_object.assert_not_called()

    def test_storage_down(self, authenticated_client, patched_storage, s3_client, pdf_file):
        """
        Why it matters: Outages are reported as 503 so clients can retry.
        """
        s3_client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://localhost:9000")

        response = authenticated_client.post(f"{BASE}upload/", {"file": pdf_file}, format="multipart")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data["error_code"] == "STORAGE_UNAVAILABLE"

    def test_requires_authentication(self, db, patched_storage, pdf_file):
        """
        Why it matters: Anonymous users cannot fill the bucket.
        """
        response = APIClient().post(f"{BASE}upload/", {"file": pdf_file}, format="multipart")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestPresignedEndpoints:
    def test_presigned_upload(self, authenticated_client, user, patched_storage):
        """
        Why it matters: Direct uploads are keyed under the caller's prefix.
        """
        response = authenticated_client.post(
            f"{BASE}presigned-upload/",
            {"file_name": "photo.jpg", "content_type": "image/jpeg"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["key"].startswith(f"users/{user.id}/")
        assert response.data["expires_in"] == 3600

    def test_presigned_upload_validates_input(self, authenticated_client, patched_storage):
        """
        Why it matters: Both name and content type are needed to sign the PUT.
        """
        response = authenticated_client.post(
            f"{BASE}presigned-upload/", {"file_name": "photo.jpg"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_presigned_download_own_key(self, authenticated_client, user, patched_storage):
        """
        Why it matters: Users can fetch their own private files.
        """
        response = authenticated_client.post(
            f"{BASE}presigned-download/", {"key": f"users/{user.id}/a.pdf"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert "download_url" in response.data

    def test_presigned_download_foreign_key(self, authenticated_client, user, patched_storage, s3_client):
        """
        Why it matters: Presigned links must not leak other users' files.
        """
        response = authenticated_client.post(
            f"{BASE}presigned-download/", {"key": f"users/{user.id + 1}/a.pdf"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_FILE_OWNER"
        s3_client.generate_presigned_url.assert_not_called()


class TestFileUrlAndDelete:
    def test_public_url(self, authenticated_client, patched_storage):
        """
        Why it matters: Clients can rebuild a URL from a stored key.
        """
        response = authenticated_client.get(f"{BASE}url/", {"key": "users/1/a.png"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"url": "http://localhost:9000/uploads/users/1/a.png"}

    def test_url_requires_key(self, authenticated_client, patched_storage):
        """
        Why it matters: A blank key is a client error, not a URL to the bucket root.
        """
        response = authenticated_client.get(f"{BASE}url/")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "MISSING_FILE_KEY"

    def test_delete_own_file(self, authenticated_client, user, patched_storage, s3_client):
        """
        Why it matters: Users can clean up their uploads.
        """
        key = f"users/{user.id}/a.png"

        response = authenticated_client.delete(f"{BASE}?key={key}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        s3_client.delete_object.assert_called_once_with(Bucket="uploads", Key=key)

    def test_cannot_delete_foreign_file(self, authenticated_client, patched_storage, s3_client):
        """
        Why it matters: Deleting someone else's avatar would break their profile.
        """
        response = authenticated_client.delete(f"{BASE}?key=uploads/shared.png")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        s3_client.delete_object.assert_not_called()
