"""
Tests for the error taxonomy and the DRF exception handler.
"""

import pytest
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import api_exception_handler
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("error_class", "status"),
        [
            (ValidationError, 400),
            (UnauthorizedError, 401),
            (PermissionDeniedError, 403),
            (NotFoundError, 404),
            (ConflictError, 409),
            (RateLimitError, 429),
            (ExternalServiceError, 503),
        ],
    )
    def test_each_class_carries_its_status(self, error_class, status):
        """
        Every error class maps to one HTTP status.

        Why it matters: The response status is derived from the class alone.
        """
        assert error_class("x").status_code == status
        assert issubclass(error_class, BaseApplicationError)

    def test_to_dict_includes_details_when_present(self):
        """
        Details are only included when set.

        Why it matters: Error bodies stay minimal by default.
        """
        bare = NotFoundError("User not found", error_code="USER_NOT_FOUND")
        detailed = ValidationError("Too big", details={"size": 11})

        assert bare.to_dict() == {"error": "User not found", "error_code": "USER_NOT_FOUND"}
        assert detailed.to_dict()["details"] == {"size": 11}


class TestApiExceptionHandler:
    def test_application_error_rendered(self):
        """
        Raised application errors become the standard JSON body.

        Why it matters: Raised and returned failures look the same to clients.
        """
        response = api_exception_handler(ConflictError("Already connected", error_code="ALREADY_CONNECTED"), {})

        assert response.status_code == 409
        assert response.data == {
            "success": False,
            "error": "Already connected",
            "error_code": "ALREADY_CONNECTED",
        }

    def test_other_errors_fall_through_to_drf(self):
        """
        DRF's own exceptions keep DRF's rendering.

        Why it matters: 401s from authentication keep their standard shape.
        """
        response = api_exception_handler(NotAuthenticated(), {})

        assert response.status_code == 401
        assert "detail" in response.data

    def test_unknown_exception_returns_none(self):
        """
        Non-API exceptions are left to Django.

        Why it matters: Real bugs still surface as 500s with tracebacks.
        """
        assert api_exception_handler(RuntimeError("bug"), {}) is None
