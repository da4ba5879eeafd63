"""
Django admin configuration for chat models.
"""

from django.contrib import admin

from chat.models import Conversation, Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    fields = ["sender", "content", "message_type", "is_read", "created_at"]
    readonly_fields = ["created_at"]
    raw_id_fields = ["sender"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ["id", "user_low", "user_high", "last_message_at", "created_at"]
    search_fields = ["user_low__username", "user_high__username"]
    raw_id_fields = ["user_low", "user_high"]
    readonly_fields = ["created_at", "updated_at", "last_message_at"]
    inlines = [MessageInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["id", "conversation", "sender", "message_type", "is_read", "created_at"]
    list_filter = ["message_type", "is_read"]
    search_fields = ["content"]
    raw_id_fields = ["conversation", "sender"]
    readonly_fields = ["created_at"]
