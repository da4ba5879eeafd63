"""
Object storage service.

Wraps an S3-compatible bucket (MinIO locally, S3 in deployment) behind a
small interface used by profile pictures, project images, certificates and
the generic file endpoints.

Keys are generated from a millisecond timestamp, a random suffix and the
sanitized original name so concurrent uploads never collide:

    users/{user_id}/{timestamp}-{random}-{base}.{ext}
    uploads/{timestamp}-{random}-{base}.{ext}

Failures talking to the bucket raise ExternalServiceError (503).
delete_best_effort() is the log-and-continue variant used when replacing
or removing an old blob must not fail the parent operation.

Usage:
    from media.services import get_storage_service

    storage = get_storage_service()
    stored = storage.upload(request.FILES["file"], user_id=request.user.id)
    storage.delete_best_effort(old_key)
"""

from __future__ import annotations

import json
import logging
import re
import secrets
import string
import time
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from core.exceptions import ExternalServiceError, ValidationError

if TYPE_CHECKING:
    from typing import Any

    from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

_RANDOM_ALPHABET = string.ascii_lowercase + string.digits
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StoredFile:
    """Metadata for an object written to the bucket."""

    key: str
    url: str
    original_name: str
    size: int
    content_type: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class StorageService:
    """
    S3-compatible object storage.

    The boto3 client is created lazily from settings; tests pass a mock
    client instead.

    Args:
        client: Pre-built S3 client (optional)
        bucket_name: Bucket to use (defaults to S3_BUCKET_NAME)
        endpoint: Public endpoint used to build object URLs
        presigned_url_expiry: Default lifetime of presigned URLs in seconds
    """

    def __init__(
        self,
        client=None,
        bucket_name: str | None = None,
        endpoint: str | None = None,
        presigned_url_expiry: int | None = None,
    ) -> None:
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.endpoint = (endpoint or settings.S3_ENDPOINT).rstrip("/")
        self.presigned_url_expiry = presigned_url_expiry or settings.S3_PRESIGNED_URL_EXPIRY
        self._s3_client = client

    @property
    def s3_client(self):
        """Get or create the S3 client."""
        if self._s3_client is None:
            addressing_style = "path" if settings.S3_FORCE_PATH_STYLE else "auto"
            self._s3_client = boto3.client(
                "s3",
                endpoint_url=settings.S3_ENDPOINT or None,
                region_name=settings.S3_REGION,
                aws_access_key_id=settings.S3_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY or None,
                config=Config(s3={"addressing_style": addressing_style}),
            )
        return self._s3_client

    # -------------------------------------------------------------------------
    # Keys and URLs
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_key(original_name: str, user_id: int | None = None) -> str:
        """
        Build a collision-resistant object key for an upload.

        Example:
            generate_key("My CV.pdf", user_id=7)
            # "users/7/1718000000000-k3j9x2ab-My-CV.pdf"
        """
        base, dot, extension = original_name.rpartition(".")
        if not dot:
            base, extension = extension, ""
        base = _UNSAFE_KEY_CHARS.sub("-", base).strip("-") or "file"
        extension = _UNSAFE_KEY_CHARS.sub("", extension).lower()

        timestamp = int(time.time() * 1000)
        suffix = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(8))
        filename = f"{timestamp}-{suffix}-{base}"
        if extension:
            filename = f"{filename}.{extension}"

        if user_id:
            return f"users/{user_id}/{filename}"
        return f"uploads/{filename}"

    def public_url(self, key: str) -> str:
        """Public URL of an object (bucket is served with a public-read policy)."""
        return f"{self.endpoint}/{self.bucket_name}/{key}"

    @staticmethod
    def is_owned_by(key: str, user_id: int) -> bool:
        """Whether ``key`` lives under the user's prefix."""
        return key.startswith(f"users/{user_id}/")

    # -------------------------------------------------------------------------
    # Object operations
    # -------------------------------------------------------------------------

    def put_object(self, key: str, body, content_type: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Failed to upload object {key}")
            raise ExternalServiceError(
                "File storage is unavailable",
                error_code="STORAGE_UNAVAILABLE",
            ) from e

    def upload(
        self,
        file: UploadedFile,
        user_id: int | None = None,
        key: str | None = None,
    ) -> StoredFile:
        """
        Store an uploaded file and return its metadata.

        Args:
            file: Django uploaded file (already validated)
            user_id: Owner, used for the key prefix
            key: Explicit key (generated when omitted)
        """
        key = key or self.generate_key(file.name, user_id)
        content_type = file.content_type or "application/octet-stream"
        file.seek(0)
        self.put_object(key, file.read(), content_type)

        logger.info(f"Stored {file.name} as {key} ({file.size} bytes)")
        return StoredFile(
            key=key,
            url=self.public_url(key),
            original_name=file.name,
            size=file.size,
            content_type=content_type,
        )

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Failed to delete object {key}")
            raise ExternalServiceError(
                "File storage is unavailable",
                error_code="STORAGE_UNAVAILABLE",
            ) from e
        logger.info(f"Deleted object {key}")

    def delete_best_effort(self, key: str | None) -> bool:
        """
        Delete an object, logging instead of raising on failure.

        Returns:
            True if the object was deleted (or there was nothing to delete)
        """
        if not key:
            return True
        try:
            self.delete(key)
        except ExternalServiceError:
            logger.warning(f"Best-effort delete of {key} failed; leaving orphaned object")
            return False
        return True

    # -------------------------------------------------------------------------
    # Presigned URLs
    # -------------------------------------------------------------------------

    def presigned_upload(
        self,
        file_name: str,
        content_type: str,
        user_id: int | None = None,
        expires_in: int | None = None,
    ) -> dict[str, Any]:
        """
        Presigned PUT URL for a direct client upload.

        Returns:
            {"upload_url", "key", "url", "expires_in"}
        """
        if not file_name or not content_type:
            raise ValidationError(
                "File name and content type are required",
                error_code="MISSING_FILE_INFO",
            )
        expires_in = expires_in or self.presigned_url_expiry
        key = self.generate_key(file_name, user_id)
        upload_url = self._presign(
            "put_object",
            {"Bucket": self.bucket_name, "Key": key, "ContentType": content_type},
            expires_in,
        )
        return {
            "upload_url": upload_url,
            "key": key,
            "url": self.public_url(key),
            "expires_in": expires_in,
        }

    def presigned_download(self, key: str, expires_in: int | None = None) -> dict[str, Any]:
        """
        Presigned GET URL for a private download.

        Returns:
            {"download_url", "expires_in"}
        """
        if not key:
            raise ValidationError("File key is required", error_code="MISSING_FILE_KEY")
        expires_in = expires_in or self.presigned_url_expiry
        download_url = self._presign(
            "get_object",
            {"Bucket": self.bucket_name, "Key": key},
            expires_in,
        )
        return {"download_url": download_url, "expires_in": expires_in}

    def _presign(self, client_method: str, params: dict[str, Any], expires_in: int) -> str:
        try:
            return self.s3_client.generate_presigned_url(
                ClientMethod=client_method,
                Params=params,
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Failed to presign {client_method} for {params.get('Key')}")
            raise ExternalServiceError(
                "File storage is unavailable",
                error_code="STORAGE_UNAVAILABLE",
            ) from e

    # -------------------------------------------------------------------------
    # Bucket bootstrap
    # -------------------------------------------------------------------------

    def ensure_bucket(self) -> bool:
        """
        Create the bucket if it is missing and apply a public-read policy.

        The policy is best-effort: some providers reject bucket policies.

        Returns:
            True if the bucket was created by this call
        """
        created = False
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code not in ("404", "NoSuchBucket", "NotFound"):
                logger.exception(f"Cannot access bucket {self.bucket_name}")
                raise ExternalServiceError(
                    "File storage is unavailable",
                    error_code="STORAGE_UNAVAILABLE",
                ) from e
            try:
                self.s3_client.create_bucket(Bucket=self.bucket_name)
            except (BotoCoreError, ClientError) as create_error:
                logger.exception(f"Failed to create bucket {self.bucket_name}")
                raise ExternalServiceError(
                    "File storage is unavailable",
                    error_code="STORAGE_UNAVAILABLE",
                ) from create_error
            created = True
            logger.info(f"Created bucket {self.bucket_name}")
        except BotoCoreError as e:
            logger.exception(f"Cannot reach object storage for bucket {self.bucket_name}")
            raise ExternalServiceError(
                "File storage is unavailable",
                error_code="STORAGE_UNAVAILABLE",
            ) from e

        policy = {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": "*",
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{self.bucket_name}/*"],
                }
            ],
        }
        try:
            self.s3_client.put_bucket_policy(
                Bucket=self.bucket_name,
                Policy=json.dumps(policy),
            )
        except (BotoCoreError, ClientError):
            logger.warning(f"Could not apply public-read policy to {self.bucket_name}")

        return created


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    """Process-wide StorageService built from settings."""
    return StorageService()
