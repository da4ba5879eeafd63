"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Use for expected failures (validation, business rules)
    - Exceptions: Use inside a service to bail out; convert at the service
      boundary with ServiceResult.from_exception()

Usage:
    from core.services import BaseService, ServiceResult

    class SkillService(BaseService):
        @classmethod
        def create_skill(cls, owner, **fields) -> ServiceResult[Skill]:
            if not 1 <= fields.get("level", 1) <= 5:
                return ServiceResult.failure(
                    "Level must be between 1 and 5",
                    error_code="INVALID_LEVEL",
                )
            skill = Skill.objects.create(owner=owner, **fields)
            cls.get_logger().info(f"Created skill {skill.id}")
            return ServiceResult.success(skill)

    # In view
    result = SkillService.create_skill(request.user, **data)
    if result.success:
        return Response(SkillSerializer(result.data).data, status=201)
    return Response(result.to_response(), status=result.status_code)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

from .exceptions import BaseApplicationError

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
        status: HTTP status for a failure (None means 400)

    Usage:
        result = ConnectionService.send_request(sender, receiver_id)
        if result.success:
            request = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)
    status: int | None = None

    @classmethod
    def ok(cls, data: T) -> ServiceResult[T]:
        """Alias for success() - use whichever reads better in context."""
        return cls(success=True, data=data)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        status: int | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
            status: HTTP status to surface (defaults to 400)

        Example:
            return ServiceResult.failure(
                "Validation failed",
                error_code="VALIDATION_ERROR",
                errors={"title": ["This field is required."]},
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
            status=status,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own code and HTTP status; anything
        else is reported with the exception class name.

        Args:
            exc: The caught exception
            error_code: Optional error code override

        Example:
            try:
                conversation = ConversationRouter.get_or_create(a, b)
            except BaseApplicationError as e:
                return ServiceResult.from_exception(e)
        """
        if isinstance(exc, BaseApplicationError):
            return cls(
                success=False,
                error=exc.message,
                error_code=error_code or exc.error_code,
                errors=exc.details or None,
                status=exc.status_code,
            )
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    @property
    def status_code(self) -> int:
        """HTTP status for this result: 200 on success, else the failure status."""
        if self.success:
            return 200
        return self.status or 400

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Returns:
            Dict with success status and data or error details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def map(self, func) -> ServiceResult:
        """
        Transform the data if successful.

        Example:
            result = ProjectService.get_project(user, project_id)
            serialized = result.map(lambda p: ProjectSerializer(p).data)
        """
        if self.success and self.data is not None:
            return ServiceResult.success(func(self.data))
        return self  # type: ignore

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Exception handling patterns

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code.

        Example:
            with cls.atomic():
                request.status = ConnectionRequest.Status.ACCEPTED
                request.save(update_fields=["status", "updated_at"])
                Connection.objects.create_between(request.sender, request.receiver)
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Convert exception to ServiceResult with logging.

        Args:
            exc: The caught exception
            context: Additional context for logging
            log_level: Logging level (default ERROR)
        """
        logger = cls.get_logger()
        message = f"{context}: {exc}" if context else str(exc)
        logger.log(log_level, message, exc_info=log_level >= logging.ERROR)
        return ServiceResult.from_exception(exc)

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        Returns a failure result if any field is None or blank, None otherwise.

        Example:
            validation = cls.validate_required(name=name, category=category)
            if validation is not None:
                return validation
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            missing = ", ".join(errors)
            return ServiceResult.failure(
                f"Required fields missing: {missing}",
                error_code="VALIDATION_ERROR",
                errors=errors,
            )
        return None
