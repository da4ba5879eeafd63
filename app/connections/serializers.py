"""
Serializers for connection requests and connections.
"""

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from connections.models import Connection, ConnectionRequest


class ConnectionRequestSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)
    receiver = PublicUserSerializer(read_only=True)

    class Meta:
        model = ConnectionRequest
        fields = ["id", "sender", "receiver", "status", "message", "created_at", "updated_at"]
        read_only_fields = fields


class ConnectionRequestCreateSerializer(serializers.Serializer):
    receiver_id = serializers.IntegerField(min_value=1)
    message = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
    )


class ConnectionSerializer(serializers.ModelSerializer):
    """
    A connection from the viewpoint of the requesting user.

    Requires ``user_id`` in the serializer context to pick the other side.
    """

    user = serializers.SerializerMethodField()
    connected_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Connection
        fields = ["id", "user", "connected_at"]
        read_only_fields = fields

    def get_user(self, obj):
        user_id = self.context["user_id"]
        other = obj.user_high if obj.user_low_id == user_id else obj.user_low
        return PublicUserSerializer(other).data


class ConnectionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=["self", "connected", "request_sent", "request_received", "not_connected"]
    )
    connection_id = serializers.IntegerField(required=False)
    request_id = serializers.IntegerField(required=False)
