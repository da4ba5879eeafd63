"""
Core abstract models shared by the domain apps.

Base Classes:
    BaseModel: Abstract model with timestamps (created_at, updated_at)
    UserPairModel: Abstract unordered pair of users stored as (low, high)

Usage:
    from core.models import BaseModel, UserPairModel

    class Connection(UserPairModel):
        pass

    Connection.objects.get_or_create(**Connection.pair_lookup(a.id, b.id))

Note:
    - Always list mixins before BaseModel in inheritance
"""

from __future__ import annotations

from django.conf import settings
from django.db import models


class BaseModel(models.Model):
    """
    Abstract base model providing creation and modification timestamps.

    Fields:
        created_at: Set when the object is first created (indexed)
        updated_at: Updated whenever the object is saved
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.pk})"


class UserPairModel(BaseModel):
    """
    Abstract record for an unordered pair of users.

    The pair is always stored with the smaller user id in ``user_low`` so a
    lookup is idempotent regardless of call direction. The database enforces
    both the ordering (check constraint) and one row per pair (unique
    constraint); concrete models inherit both.

    Fields:
        user_low: Participant with the smaller id
        user_high: Participant with the larger id
    """

    user_low = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_as_low",
    )
    user_high = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(app_label)s_%(class)s_as_high",
    )

    class Meta(BaseModel.Meta):
        abstract = True
        constraints = [
            models.UniqueConstraint(
                fields=["user_low", "user_high"],
                name="%(app_label)s_%(class)s_unique_pair",
            ),
            models.CheckConstraint(
                condition=models.Q(user_low__lt=models.F("user_high")),
                name="%(app_label)s_%(class)s_ordered_pair",
            ),
        ]

    @staticmethod
    def normalize_pair(user_a_id: int, user_b_id: int) -> tuple[int, int]:
        """Return the pair as (smaller id, larger id)."""
        return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)

    @classmethod
    def pair_lookup(cls, user_a_id: int, user_b_id: int) -> dict[str, int]:
        """Keyword arguments that select the row for this pair."""
        low, high = cls.normalize_pair(user_a_id, user_b_id)
        return {"user_low_id": low, "user_high_id": high}

    def involves(self, user_id: int) -> bool:
        return user_id in (self.user_low_id, self.user_high_id)

    def other_user_id(self, user_id: int) -> int:
        """Id of the participant that is not ``user_id``."""
        return self.user_high_id if user_id == self.user_low_id else self.user_low_id
