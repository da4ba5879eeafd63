"""
URL configuration for the file endpoints.

Files:
    POST   /upload/               - Upload file
    POST   /presigned-upload/     - Presigned upload URL
    POST   /presigned-download/   - Presigned download URL
    GET    /url/?key=             - Public URL
    DELETE /?key=                 - Delete file
"""

from django.urls import path

from media.views import (
    FileDeleteView,
    FileUploadView,
    FileUrlView,
    PresignedDownloadView,
    PresignedUploadView,
)

app_name = "media"

urlpatterns = [
    path("upload/", FileUploadView.as_view(), name="upload"),
    path("presigned-upload/", PresignedUploadView.as_view(), name="presigned-upload"),
    path("presigned-download/", PresignedDownloadView.as_view(), name="presigned-download"),
    path("url/", FileUrlView.as_view(), name="url"),
    path("", FileDeleteView.as_view(), name="delete"),
]
