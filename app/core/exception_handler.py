"""
DRF exception handler that renders application errors.

Services raise BaseApplicationError subclasses; views that let them
propagate get the same JSON body a failed ServiceResult produces.
Everything else falls through to DRF's default handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """
    Convert BaseApplicationError into a JSON error response.

    Example response (409):
        {"success": false, "error": "Username already exists",
         "error_code": "USERNAME_TAKEN"}
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        if exc.status_code >= 500:
            logger.error(f"{view.__class__.__name__ if view else 'view'} failed: {exc}")
        body = {"success": False, **exc.to_dict()}
        return Response(body, status=exc.status_code)

    return exception_handler(exc, context)
