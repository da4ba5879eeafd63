"""
File endpoints backed by object storage.

URL Structure:
    /api/v1/files/upload/                POST    multipart upload (10MB max)
    /api/v1/files/presigned-upload/      POST    presigned PUT URL
    /api/v1/files/presigned-download/    POST    presigned GET URL (own keys)
    /api/v1/files/url/?key=              GET     public URL for a key
    /api/v1/files/?key=                  DELETE  delete an object (own keys)

Storage failures raise ExternalServiceError and validation failures raise
ValidationError; both are rendered by core.exception_handler.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import PermissionDeniedError, ValidationError
from media.serializers import (
    FileUploadSerializer,
    PresignedDownloadRequestSerializer,
    PresignedDownloadSerializer,
    PresignedUploadRequestSerializer,
    PresignedUploadSerializer,
    StoredFileSerializer,
)
from media.services import get_storage_service
from media.validators import validate_upload

KEY_PARAMETER = OpenApiParameter(
    name="key",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.QUERY,
    required=True,
    description="Object key returned by an upload",
)


def _require_key(request) -> str:
    key = (request.query_params.get("key") or "").strip()
    if not key:
        raise ValidationError("File key is required", error_code="MISSING_FILE_KEY")
    return key


def _require_owned_key(request, key: str) -> None:
    if not get_storage_service().is_owned_by(key, request.user.id):
        raise PermissionDeniedError(
            "You can only access your own files",
            error_code="NOT_FILE_OWNER",
        )


class FileUploadView(APIView):
    """
    Upload a file to object storage.

    Request:
        Content-Type: multipart/form-data
        - file (required): jpeg, png, gif, webp, pdf, text, doc or docx; 10MB max

    Response:
        201 Created: {key, url, original_name, size, content_type}
        400 Bad Request: missing file, type not allowed, too large
        503 Service Unavailable: storage down
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="files_upload",
        summary="Upload file",
        request=FileUploadSerializer,
        responses={
            201: StoredFileSerializer,
            400: OpenApiResponse(description="Missing file, type not allowed or too large"),
            503: OpenApiResponse(description="Object storage unavailable"),
        },
        tags=["Files"],
    )
    def post(self, request):
        file = validate_upload(request.FILES.get("file"))
        stored = get_storage_service().upload(file, user_id=request.user.id)
        return Response(
            StoredFileSerializer(stored.to_dict()).data,
            status=status.HTTP_201_CREATED,
        )


class PresignedUploadView(APIView):
    """Issue a presigned PUT URL so the client uploads directly to the bucket."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="files_presigned_upload",
        summary="Get presigned upload URL",
        request=PresignedUploadRequestSerializer,
        responses={200: PresignedUploadSerializer},
        tags=["Files"],
    )
    def post(self, request):
        serializer = PresignedUploadRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = get_storage_service().presigned_upload(
            file_name=serializer.validated_data["file_name"],
            content_type=serializer.validated_data["content_type"],
            user_id=request.user.id,
        )
        return Response(payload)


class PresignedDownloadView(APIView):
    """Issue a presigned GET URL for one of the caller's objects."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="files_presigned_download",
        summary="Get presigned download URL",
        request=PresignedDownloadRequestSerializer,
        responses={200: PresignedDownloadSerializer},
        tags=["Files"],
    )
    def post(self, request):
        serializer = PresignedDownloadRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        key = serializer.validated_data["key"]
        _require_owned_key(request, key)

        return Response(get_storage_service().presigned_download(key))


class FileUrlView(APIView):
    """Public URL for an object key."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="files_url",
        summary="Get file URL",
        parameters=[KEY_PARAMETER],
        responses={200: OpenApiResponse(description="{url}")},
        tags=["Files"],
    )
    def get(self, request):
        key = _require_key(request)
        return Response({"url": get_storage_service().public_url(key)})


class FileDeleteView(APIView):
    """Delete one of the caller's objects."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="files_delete",
        summary="Delete file",
        parameters=[KEY_PARAMETER],
        responses={
            204: None,
            403: OpenApiResponse(description="Key belongs to another user"),
            503: OpenApiResponse(description="Object storage unavailable"),
        },
        tags=["Files"],
    )
    def delete(self, request):
        key = _require_key(request)
        _require_owned_key(request, key)
        get_storage_service().delete(key)
        return Response(status=status.HTTP_204_NO_CONTENT)
