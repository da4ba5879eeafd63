"""
Composable query predicates for search and filter endpoints.

List endpoints accept several optional filters (free-text search, role,
category). Each filter is built as a Predicate and the results are
combined with ``&``; a filter with no value builds ``Predicate.everything()``
so callers never branch on which combination of filters was supplied.

Usage:
    from core.predicates import field_equals, text_search

    predicate = text_search(q, ["first_name", "last_name", "username"],
                            full_name=("first_name", "last_name"))
    predicate &= field_equals("role", role)
    users = predicate.apply(User.objects.all())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db.models import Q, Value
from django.db.models.functions import Concat

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

    from django.db.models import QuerySet


@dataclass(frozen=True)
class Predicate:
    """
    A filter condition plus the annotations it needs.

    Attributes:
        condition: Q object applied with .filter()
        annotations: Expressions added with .annotate() before filtering
    """

    condition: Q = field(default_factory=Q)
    annotations: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def everything(cls) -> Predicate:
        """Predicate that matches every row."""
        return cls()

    @property
    def is_everything(self) -> bool:
        return not self.condition and not self.annotations

    def __and__(self, other: Predicate) -> Predicate:
        return Predicate(
            condition=self.condition & other.condition,
            annotations={**self.annotations, **other.annotations},
        )

    def apply(self, queryset: QuerySet) -> QuerySet:
        if self.annotations:
            queryset = queryset.annotate(**self.annotations)
        if self.condition:
            queryset = queryset.filter(self.condition)
        return queryset


def text_search(
    term: str | None,
    fields: Iterable[str],
    full_name: tuple[str, str] | None = None,
) -> Predicate:
    """
    Case-insensitive substring match over several fields.

    Args:
        term: Search text; blank or None matches everything
        fields: Model fields to OR together with icontains
        full_name: Optional (first, last) pair also matched as "first last"

    Example:
        text_search("ada love", ["first_name"], full_name=("first_name", "last_name"))
        # matches first_name="Ada", last_name="Lovelace" via the full name
    """
    term = (term or "").strip()
    if not term:
        return Predicate.everything()

    condition = Q()
    for name in fields:
        condition |= Q(**{f"{name}__icontains": term})

    annotations: dict[str, Any] = {}
    if full_name:
        first, last = full_name
        annotations["search_full_name"] = Concat(first, Value(" "), last)
        condition |= Q(search_full_name__icontains=term)

    return Predicate(condition=condition, annotations=annotations)


def field_equals(field_name: str, value: Any) -> Predicate:
    """Exact match on one field; None or "" matches everything."""
    if value is None or value == "":
        return Predicate.everything()
    return Predicate(condition=Q(**{field_name: value}))


def combine(*predicates: Predicate) -> Predicate:
    """AND together any number of predicates."""
    result = Predicate.everything()
    for predicate in predicates:
        result &= predicate
    return result
