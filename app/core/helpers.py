"""
Helper functions for common infrastructure operations.

This module provides domain-agnostic utility functions for:
- Pagination metadata and query parameter parsing
- Progress percentages

Usage:
    from core.helpers import calculate_pagination, parse_page_params

    page, limit = parse_page_params(request.query_params, default_limit=20)
    pagination = calculate_pagination(total=total, page=page, per_page=limit)
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def calculate_pagination(total: int, page: int, per_page: int) -> dict:
    """
    Calculate pagination metadata.

    Args:
        total: Total number of items
        page: Current page number (1-indexed)
        per_page: Items per page

    Returns:
        Dict with pagination metadata

    Example:
        pagination = calculate_pagination(total=100, page=3, per_page=20)
        # {
        #     "total": 100,
        #     "page": 3,
        #     "per_page": 20,
        #     "total_pages": 5,
        #     "has_next": True,
        #     "has_previous": True,
        # }
    """
    total_pages = math.ceil(total / per_page) if per_page > 0 else 0

    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }


def parse_page_params(
    params: Mapping[str, str],
    default_limit: int = 20,
    max_limit: int = 100,
) -> tuple[int, int]:
    """
    Read ``page`` and ``limit`` query parameters.

    Non-numeric or non-positive values fall back to page 1 and the default
    limit; the limit is capped at ``max_limit``.
    """

    def _positive(raw: str | None, default: int) -> int:
        try:
            value = int(raw) if raw is not None else default
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    page = _positive(params.get("page"), 1)
    limit = min(_positive(params.get("limit"), default_limit), max_limit)
    return page, limit


def percentage(part: int, whole: int) -> int:
    """
    Whole-number percentage rounded half up; 0 when ``whole`` is 0.

    Example:
        percentage(2, 3)  # 67
        percentage(1, 2)  # 50
    """
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
