from django.contrib import admin

from connections.models import Connection, ConnectionRequest


@admin.register(ConnectionRequest)
class ConnectionRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "receiver", "status", "created_at")
    list_filter = ("status",)
    raw_id_fields = ("sender", "receiver")


@admin.register(Connection)
class ConnectionAdmin(admin.ModelAdmin):
    list_display = ("id", "user_low", "user_high", "created_at")
    raw_id_fields = ("user_low", "user_high")
