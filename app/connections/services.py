"""
Connection request workflow.

Services:
    ConnectionService: Send, accept and reject requests; list, inspect and
    remove connections

Check-then-insert steps run in one transaction with the rows of both
directions locked (select_for_update). Locks cannot cover rows that do
not exist yet, so the partial unique constraint on the pending user pair
(either direction) is the backstop when two requests race; the resulting
IntegrityError is reported as a conflict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import Q

from connections.models import Connection, ConnectionRequest
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

User = get_user_model()


class ConnectionStatus:
    SELF = "self"
    CONNECTED = "connected"
    REQUEST_SENT = "request_sent"
    REQUEST_RECEIVED = "request_received"
    NOT_CONNECTED = "not_connected"


class RequestListType:
    RECEIVED = "received"
    SENT = "sent"
    ALL = "all"

    CHOICES = (RECEIVED, SENT, ALL)


class ConnectionService(BaseService):
    """
    Connection requests and connections.

    Usage:
        result = ConnectionService.send_request(request.user, receiver_id=7)
        if result.success:
            ConnectionService.accept(result.data.id, receiver)
    """

    @classmethod
    def send_request(
        cls,
        sender,
        receiver_id: int,
        message: str | None = None,
    ) -> ServiceResult[ConnectionRequest]:
        """
        Send a connection request.

        Error codes:
            SELF_REQUEST (400)
            USER_NOT_FOUND (404)
            ALREADY_CONNECTED (409)
            REQUEST_EXISTS: Pending request in either direction (409)
        """
        try:
            with cls.atomic():
                if sender.id == receiver_id:
                    raise ValidationError(
                        "Cannot send connection request to yourself",
                        error_code="SELF_REQUEST",
                    )
                if not User.objects.filter(pk=receiver_id, is_active=True).exists():
                    raise NotFoundError("Receiver not found", error_code="USER_NOT_FOUND")
                if Connection.objects.between(sender.id, receiver_id).exists():
                    raise ConflictError(
                        "Already connected with this user",
                        error_code="ALREADY_CONNECTED",
                    )

                pending = list(
                    ConnectionRequest.objects.select_for_update()
                    .between(sender.id, receiver_id)
                    .pending()
                )
                if pending:
                    raise ConflictError(
                        "Connection request already exists",
                        error_code="REQUEST_EXISTS",
                    )

                connection_request = ConnectionRequest.objects.create(
                    sender=sender,
                    receiver_id=receiver_id,
                    message=(message or "").strip() or None,
                )
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)
        except IntegrityError:
            return ServiceResult.failure(
                "Connection request already exists",
                error_code="REQUEST_EXISTS",
                status=409,
            )

        cls.get_logger().info(
            f"User {sender.id} sent connection request {connection_request.id} to {receiver_id}"
        )
        return ServiceResult.success(connection_request)

    @classmethod
    def accept(cls, request_id: int, user) -> ServiceResult[Connection]:
        """
        Accept a pending request addressed to ``user``.

        Marks the request accepted and creates the connection in the same
        transaction. A reverse pending request, if any, is left untouched.

        Error codes:
            REQUEST_NOT_FOUND (404)
            NOT_REQUEST_RECEIVER (403)
            REQUEST_NOT_PENDING (400)
        """
        try:
            with cls.atomic():
                connection_request = cls._lock_pending_for_receiver(request_id, user)
                connection_request.status = ConnectionRequest.Status.ACCEPTED
                connection_request.save(update_fields=["status", "updated_at"])
                connection, _ = Connection.objects.get_or_create(
                    **Connection.pair_lookup(
                        connection_request.sender_id,
                        connection_request.receiver_id,
                    )
                )
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        cls.get_logger().info(
            f"Connection request {request_id} accepted; connection {connection.id} created"
        )
        return ServiceResult.success(connection)

    @classmethod
    def reject(cls, request_id: int, user) -> ServiceResult[ConnectionRequest]:
        """
        Reject a pending request addressed to ``user``. No connection is made.

        Error codes:
            REQUEST_NOT_FOUND (404)
            NOT_REQUEST_RECEIVER (403)
            REQUEST_NOT_PENDING (400)
        """
        try:
            with cls.atomic():
                connection_request = cls._lock_pending_for_receiver(request_id, user)
                connection_request.status = ConnectionRequest.Status.REJECTED
                connection_request.save(update_fields=["status", "updated_at"])
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        cls.get_logger().info(f"Connection request {request_id} rejected")
        return ServiceResult.success(connection_request)

    @classmethod
    def _lock_pending_for_receiver(cls, request_id: int, user) -> ConnectionRequest:
        connection_request = (
            ConnectionRequest.objects.select_for_update().filter(pk=request_id).first()
        )
        if connection_request is None:
            raise NotFoundError(
                "Connection request not found",
                error_code="REQUEST_NOT_FOUND",
            )
        if connection_request.receiver_id != user.id:
            raise PermissionDeniedError(
                "Only the receiver can respond to this request",
                error_code="NOT_REQUEST_RECEIVER",
            )
        if not connection_request.is_pending:
            raise ValidationError(
                "Request is not pending",
                error_code="REQUEST_NOT_PENDING",
            )
        return connection_request

    @classmethod
    def list_requests(
        cls,
        user,
        request_type: str = RequestListType.RECEIVED,
    ) -> ServiceResult[QuerySet]:
        """
        Pending requests for ``user``, newest first.

        Args:
            request_type: "received", "sent" or "all"
        """
        if request_type == RequestListType.RECEIVED:
            condition = Q(receiver=user)
        elif request_type == RequestListType.SENT:
            condition = Q(sender=user)
        elif request_type == RequestListType.ALL:
            condition = Q(receiver=user) | Q(sender=user)
        else:
            return ServiceResult.failure(
                f"type must be one of: {', '.join(RequestListType.CHOICES)}",
                error_code="INVALID_REQUEST_TYPE",
            )

        queryset = (
            ConnectionRequest.objects.pending()
            .filter(condition)
            .select_related("sender", "receiver")
            .order_by("-created_at", "-id")
        )
        return ServiceResult.success(queryset)

    @classmethod
    def list_connections(cls, user) -> QuerySet:
        """Connections of ``user``, most recent first."""
        return (
            Connection.objects.involving(user.id)
            .select_related("user_low", "user_high")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def status(cls, user, other_user_id: int) -> dict[str, Any]:
        """
        Relationship between ``user`` and another user.

        Returns:
            {"status": "self" | "connected" | "request_sent" |
             "request_received" | "not_connected",
             "connection_id"?: int, "request_id"?: int}
        """
        if user.id == other_user_id:
            return {"status": ConnectionStatus.SELF}

        connection = Connection.objects.between(user.id, other_user_id).first()
        if connection is not None:
            return {"status": ConnectionStatus.CONNECTED, "connection_id": connection.id}

        pending = (
            ConnectionRequest.objects.pending()
            .between(user.id, other_user_id)
            .order_by("-created_at")
            .first()
        )
        if pending is not None:
            status = (
                ConnectionStatus.REQUEST_SENT
                if pending.sender_id == user.id
                else ConnectionStatus.REQUEST_RECEIVED
            )
            return {"status": status, "request_id": pending.id}

        return {"status": ConnectionStatus.NOT_CONNECTED}

    @classmethod
    def disconnect(cls, user, other_user_id: int) -> ServiceResult[None]:
        """
        Remove the connection between ``user`` and another user.

        The accepted request stays accepted; connecting again needs a new
        request.

        Error codes:
            NOT_CONNECTED (404)
        """
        deleted, _ = Connection.objects.between(user.id, other_user_id).delete()
        if not deleted:
            return ServiceResult.failure(
                "Connection not found",
                error_code="NOT_CONNECTED",
                status=404,
            )
        cls.get_logger().info(f"User {user.id} disconnected from {other_user_id}")
        return ServiceResult.success(None)

