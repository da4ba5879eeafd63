"""
Serializers for the file endpoints.

Provides:
- FileUploadSerializer: multipart upload input
- StoredFileSerializer: upload result
- PresignedUploadRequestSerializer / PresignedUploadSerializer
- PresignedDownloadRequestSerializer / PresignedDownloadSerializer
- FileKeySerializer
"""

from rest_framework import serializers


class FileUploadSerializer(serializers.Serializer):
    file = serializers.FileField(required=False, help_text="The file to upload")


class StoredFileSerializer(serializers.Serializer):
    key = serializers.CharField()
    url = serializers.URLField()
    original_name = serializers.CharField()
    size = serializers.IntegerField()
    content_type = serializers.CharField()


class PresignedUploadRequestSerializer(serializers.Serializer):
    file_name = serializers.CharField(max_length=255)
    content_type = serializers.CharField(max_length=255)


class PresignedUploadSerializer(serializers.Serializer):
    upload_url = serializers.URLField()
    key = serializers.CharField()
    url = serializers.URLField()
    expires_in = serializers.IntegerField()


class PresignedDownloadRequestSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=500)


class PresignedDownloadSerializer(serializers.Serializer):
    download_url = serializers.URLField()
    expires_in = serializers.IntegerField()


class FileKeySerializer(serializers.Serializer):
    key = serializers.CharField(max_length=500)
