"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. No domain logic lives
here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps
    - UserPairModel: Abstract normalized (low, high) user pair

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError and its HTTP-status-carrying subclasses

Predicates (import from core.predicates):
    - Predicate, text_search, field_equals, combine

Helpers (import from core.helpers):
    - calculate_pagination, parse_page_params, percentage

Note:
    Models are NOT imported here to avoid AppRegistryNotReady errors.
    Import them directly from core.models.
"""

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)
from .helpers import calculate_pagination, parse_page_params, percentage
from .services import BaseService, ServiceResult

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "RateLimitError",
    "ExternalServiceError",
    # Helpers
    "calculate_pagination",
    "parse_page_params",
    "percentage",
]
