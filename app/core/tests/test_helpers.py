"""
Tests for pagination and percentage helpers.
"""

import pytest

from core.helpers import calculate_pagination, parse_page_params, percentage


class TestPercentage:
    @pytest.mark.parametrize(
        ("part", "whole", "expected"),
        [(0, 3, 0), (1, 3, 33), (2, 3, 67), (3, 3, 100), (1, 2, 50), (1, 8, 13), (0, 0, 0)],
    )
    def test_rounds_half_up(self, part, whole, expected):
        """
        Percentages round half up and are 0 for an empty whole.

        Why it matters: Roadmap progress must show 67% for 2 of 3 tasks.
        """
        assert percentage(part, whole) == expected

    def test_half_rounds_up_not_to_even(self):
        """
        12.5 rounds to 13, not 12.

        Why it matters: Python's round() uses banker's rounding.
        """
        assert percentage(1, 8) == 13


class TestPageParams:
    def test_defaults(self):
        """
        Missing params give page 1 and the default limit.

        Why it matters: Every list endpoint works without query params.
        """
        assert parse_page_params({}, default_limit=20) == (1, 20)

    def test_invalid_values_fall_back(self):
        """
        Non-numeric and non-positive values fall back to defaults.

        Why it matters: Bad query strings must not raise 500s.
        """
        assert parse_page_params({"page": "abc", "limit": "-5"}, default_limit=10) == (1, 10)

    def test_limit_is_capped(self):
        """
        The limit never exceeds max_limit.

        Why it matters: Clients cannot request unbounded pages.
        """
        assert parse_page_params({"page": "3", "limit": "500"}, max_limit=100) == (3, 100)


class TestCalculatePagination:
    def test_middle_page(self):
        """
        Metadata reports neighbours correctly.

        Why it matters: Clients render next/previous buttons from it.
        """
        meta = calculate_pagination(total=45, page=2, per_page=20)

        assert meta["total_pages"] == 3
        assert meta["has_next"] is True
        assert meta["has_previous"] is True

    def test_empty(self):
        """
        Zero rows gives zero pages.

        Why it matters: An empty search shows no pager.
        """
        meta = calculate_pagination(total=0, page=1, per_page=10)

        assert meta["total_pages"] == 0
        assert meta["has_next"] is False
