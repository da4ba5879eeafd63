"""
Connection views.

URL structure (prefix /api/v1/connections/):
    requests/                  GET    Pending requests (?type=received|sent|all)
                               POST   Send a request
    requests/{id}/accept/      POST   Accept (receiver only)
    requests/{id}/reject/      POST   Reject (receiver only)
    ""                         GET    My connections
    status/{user_id}/          GET    Relationship with another user
    {user_id}/                 DELETE Disconnect
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from connections.serializers import (
    ConnectionRequestCreateSerializer,
    ConnectionRequestSerializer,
    ConnectionSerializer,
    ConnectionStatusSerializer,
)
from connections.services import ConnectionService, RequestListType


class ConnectionRequestListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connection_requests_list",
        summary="List pending connection requests",
        parameters=[
            OpenApiParameter(
                "type",
                OpenApiTypes.STR,
                enum=list(RequestListType.CHOICES),
                description="Defaults to received",
            ),
        ],
        responses={200: ConnectionRequestSerializer(many=True)},
        tags=["Connections"],
    )
    def get(self, request):
        result = ConnectionService.list_requests(
            request.user,
            request.query_params.get("type", RequestListType.RECEIVED),
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(ConnectionRequestSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="connection_requests_create",
        summary="Send connection request",
        request=ConnectionRequestCreateSerializer,
        responses={
            201: ConnectionRequestSerializer,
            400: OpenApiResponse(description="Request to yourself"),
            404: OpenApiResponse(description="Receiver not found"),
            409: OpenApiResponse(description="Already connected or request pending"),
        },
        tags=["Connections"],
    )
    def post(self, request):
        serializer = ConnectionRequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConnectionService.send_request(
            request.user,
            serializer.validated_data["receiver_id"],
            serializer.validated_data.get("message"),
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(
            ConnectionRequestSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class ConnectionRequestAcceptView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connection_requests_accept",
        summary="Accept connection request",
        request=None,
        responses={
            200: ConnectionSerializer,
            400: OpenApiResponse(description="Request is not pending"),
            403: OpenApiResponse(description="Not the receiver"),
            404: OpenApiResponse(description="Request not found"),
        },
        tags=["Connections"],
    )
    def post(self, request, request_id):
        result = ConnectionService.accept(request_id, request.user)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(
            ConnectionSerializer(result.data, context={"user_id": request.user.id}).data
        )


class ConnectionRequestRejectView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connection_requests_reject",
        summary="Reject connection request",
        request=None,
        responses={200: ConnectionRequestSerializer},
        tags=["Connections"],
    )
    def post(self, request, request_id):
        result = ConnectionService.reject(request_id, request.user)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(ConnectionRequestSerializer(result.data).data)


class ConnectionListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connections_list",
        summary="List my connections",
        responses={200: ConnectionSerializer(many=True)},
        tags=["Connections"],
    )
    def get(self, request):
        connections = ConnectionService.list_connections(request.user)
        serializer = ConnectionSerializer(
            connections,
            many=True,
            context={"user_id": request.user.id},
        )
        return Response(serializer.data)


class ConnectionStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connections_status",
        summary="Get connection status with a user",
        responses={200: ConnectionStatusSerializer},
        tags=["Connections"],
    )
    def get(self, request, user_id):
        return Response(ConnectionService.status(request.user, user_id))


class ConnectionDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="connections_delete",
        summary="Disconnect from a user",
        responses={204: None, 404: OpenApiResponse(description="Not connected")},
        tags=["Connections"],
    )
    def delete(self, request, user_id):
        result = ConnectionService.disconnect(request.user, user_id)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)
