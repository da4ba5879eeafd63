"""
Connection models.

ConnectionRequest: Directed invitation (sender -> receiver)
Connection: Undirected link between two users, created by acceptance

State machine for ConnectionRequest:
    pending -> accepted (creates a Connection)
    pending -> rejected
    accepted and rejected are terminal.
"""

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.db.models.functions import Greatest, Least

from core.models import BaseModel, UserPairModel


class ConnectionRequestQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=ConnectionRequest.Status.PENDING)

    def between(self, user_a_id: int, user_b_id: int):
        """Requests in either direction between two users."""
        return self.filter(
            Q(sender_id=user_a_id, receiver_id=user_b_id)
            | Q(sender_id=user_b_id, receiver_id=user_a_id)
        )


class ConnectionRequest(BaseModel):
    """
    Invitation to connect.

    At most one pending request may exist per user pair, whichever
    direction it was sent in.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        REJECTED = "rejected", "Rejected"

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_connection_requests",
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_connection_requests",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    message = models.TextField(null=True, blank=True)

    objects = ConnectionRequestQuerySet.as_manager()

    class Meta(BaseModel.Meta):
        constraints = [
            models.UniqueConstraint(
                Least("sender", "receiver"),
                Greatest("sender", "receiver"),
                condition=Q(status="pending"),
                name="unique_pending_connection_request_pair",
            ),
            models.CheckConstraint(
                condition=~Q(sender=F("receiver")),
                name="connection_request_not_self",
            ),
        ]

    def __str__(self):
        return f"ConnectionRequest({self.sender_id} -> {self.receiver_id}, {self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING


class ConnectionQuerySet(models.QuerySet):
    def involving(self, user_id: int):
        return self.filter(Q(user_low_id=user_id) | Q(user_high_id=user_id))

    def between(self, user_a_id: int, user_b_id: int):
        return self.filter(**Connection.pair_lookup(user_a_id, user_b_id))


class Connection(UserPairModel):
    """
    Accepted connection between two users, stored as (smaller id, larger id).

    ``created_at`` is the moment the connection was made.
    """

    objects = ConnectionQuerySet.as_manager()

    def __str__(self):
        return f"Connection({self.user_low_id} <-> {self.user_high_id})"
