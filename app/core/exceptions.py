"""
Base exception classes for application-wide error handling.

Every domain failure raised by a service maps onto one of these classes.
Each class carries the HTTP status it surfaces as, so the request boundary
(core.exception_handler for raised errors, ServiceResult for returned ones)
can turn any of them into the same JSON error body.

Exception Hierarchy:
    BaseApplicationError (base, 400)
    ├── ValidationError - Missing or malformed input (400)
    ├── UnauthorizedError - Bad credentials (401)
    ├── PermissionDeniedError - Ownership / role failures (403)
    ├── NotFoundError - Missing row (404)
    ├── ConflictError - Duplicate unique key or pending request (409)
    ├── RateLimitError - Rate limit exceeded (429)
    └── ExternalServiceError - Blob store / OAuth provider unavailable (503)

Usage:
    from core.exceptions import ConflictError, NotFoundError

    raise ConflictError("Username already exists", error_code="USERNAME_TAKEN")

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status the error is surfaced as

    Example:
        try:
            conversation = ConversationRouter.get_or_create(user_a, user_b)
        except NotFoundError as e:
            logger.warning(f"Conversation target missing: {e.error_code}")
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "User not found",
                "error_code": "USER_NOT_FOUND",
                "details": {"user_id": 123}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for missing required fields, out-of-range values (skill level,
    password length) and invalid state for an action (accepting a request
    that is no longer pending).

    Note:
        For request body shape, prefer DRF serializer validation.
        Use this for service-layer rules.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class UnauthorizedError(BaseApplicationError):
    """
    Raised when supplied credentials are wrong.

    Example:
        user = authenticate(username=username, password=password)
        if user is None:
            raise UnauthorizedError("Invalid credentials", "INVALID_CREDENTIALS")
    """

    default_error_code: str = "UNAUTHORIZED"
    status_code: int = 401


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        project = Project.objects.filter(id=project_id, owner=user).first()
        if not project:
            raise NotFoundError(
                "Project not found",
                error_code="PROJECT_NOT_FOUND",
                details={"project_id": project_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller lacks permission for an operation.

    Use for ownership checks (only the receiver may accept a connection
    request, only participants may post in a conversation) and role checks
    (admin console).
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current state.

    Use for duplicate unique keys (username, e-mail), an existing
    connection, or a pending request in either direction.

    Example:
        if ConnectionRequest.objects.pending_between(a, b).exists():
            raise ConflictError(
                "A connection request is already pending",
                error_code="REQUEST_PENDING",
            )
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class RateLimitError(BaseApplicationError):
    """
    Raised when rate limit is exceeded.

    Include retry_after in details when possible to help clients.
    """

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a downstream service is unavailable.

    Use for object storage failures and an unconfigured or failing OAuth
    provider. Log the original error; do not expose it to clients.

    Example:
        try:
            client.put_object(Bucket=bucket, Key=key, Body=body)
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"Upload failed for {key}")
            raise ExternalServiceError(
                "File storage is unavailable",
                error_code="STORAGE_UNAVAILABLE",
            ) from e
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 503
