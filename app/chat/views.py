"""
Chat API views.

URL Structure (prefix /api/v1/chat/):
    conversations/                   GET    My conversations, latest activity first
                                     POST   Get or create a conversation {user_id}
    conversations/{id}/messages/     GET    Message history (?page=&limit=)
                                     POST   Send a message {content, message_type?}
    conversations/{id}/read/         POST   Mark the counterpart's messages read
    unread-count/                    GET    Unread messages across conversations

Design Decisions:
    - Services raise application errors; core.exception_handler renders them
    - Messages posted here are broadcast exactly like socket messages
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.constants import MESSAGE_CONFIG
from chat.models import Message
from chat.serializers import (
    ConversationCreateSerializer,
    ConversationSerializer,
    MarkReadResponseSerializer,
    MarkReadSerializer,
    MessageCreateSerializer,
    MessagePageSerializer,
    MessageSerializer,
    UnreadCountSerializer,
)
from chat.services import (
    ConversationRouter,
    ConversationService,
    MessageDispatcher,
    MessageService,
)
from core.helpers import parse_page_params


class ConversationViewSet(viewsets.GenericViewSet):
    """
    Direct conversations of the current user.

    list:
        Conversations with the other participant, last message and unread
        count, most recently active first.

    create:
        Returns the existing conversation with ``user_id`` or starts one.

    messages:
        GET returns the newest page of history in chronological order;
        POST stores and broadcasts a new message.

    read:
        Marks the other participant's unread messages as read.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ConversationSerializer
    pagination_class = None

    def get_queryset(self):
        return ConversationService.list_for_user(self.request.user.id)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["user_id"] = self.request.user.id
        return context

    @extend_schema(
        operation_id="chat_conversations_list",
        summary="List my conversations",
        responses={200: ConversationSerializer(many=True)},
        tags=["Chat"],
    )
    def list(self, request):
        conversations = list(self.get_queryset())
        message_ids = [c.last_message_id for c in conversations if c.last_message_id]
        last_messages = Message.objects.select_related("sender").in_bulk(message_ids)

        context = {**self.get_serializer_context(), "last_messages": last_messages}
        return Response(ConversationSerializer(conversations, many=True, context=context).data)

    @extend_schema(
        operation_id="chat_conversations_create",
        summary="Get or create conversation",
        request=ConversationCreateSerializer,
        responses={
            200: ConversationSerializer,
            400: OpenApiResponse(description="Conversation with yourself"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat"],
    )
    def create(self, request):
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        conversation = ConversationRouter.get_or_create(
            request.user.id,
            serializer.validated_data["user_id"],
        )
        conversation = self.get_queryset().get(pk=conversation.pk)
        return Response(ConversationSerializer(conversation, context=self.get_serializer_context()).data)

    @extend_schema(
        methods=["GET"],
        operation_id="chat_messages_list",
        summary="List messages",
        parameters=[
            OpenApiParameter("page", OpenApiTypes.INT),
            OpenApiParameter("limit", OpenApiTypes.INT, description="Default 50"),
        ],
        responses={200: MessagePageSerializer},
        tags=["Chat"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="chat_messages_create",
        summary="Send message",
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            400: OpenApiResponse(description="Empty content"),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation not found"),
        },
        tags=["Chat"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "POST":
            serializer = MessageCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            message = MessageDispatcher.send(
                int(pk),
                request.user.id,
                serializer.validated_data["content"],
                message_type=serializer.validated_data["message_type"],
            )
            return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

        page, limit = parse_page_params(
            request.query_params,
            default_limit=MESSAGE_CONFIG.DEFAULT_PAGE_SIZE,
            max_limit=MESSAGE_CONFIG.MAX_PAGE_SIZE,
        )
        history = MessageService.list_messages(int(pk), request.user.id, page=page, limit=limit)
        return Response(MessagePageSerializer(history).data)

    @extend_schema(
        operation_id="chat_conversations_read",
        summary="Mark messages as read",
        request=MarkReadSerializer,
        responses={200: MarkReadResponseSerializer},
        tags=["Chat"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        count = MessageService.mark_read(
            int(pk),
            request.user.id,
            serializer.validated_data.get("message_ids"),
        )
        return Response({"success": True, "count": count})


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="chat_unread_count",
        summary="Total unread messages",
        responses={200: UnreadCountSerializer},
        tags=["Chat"],
    )
    def get(self, request):
        return Response({"unread_count": MessageService.total_unread_count(request.user.id)})
