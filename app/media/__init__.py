"""
Media app: object storage for uploads.

This app provides:
- StorageService wrapping an S3-compatible bucket (MinIO locally)
- Upload validators for content type and size
- File endpoints (upload, presigned URLs, public URL, delete)
- ensure_bucket management command
"""
