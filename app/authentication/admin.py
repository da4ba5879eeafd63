"""
Django admin configuration for the User model.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for username/Google accounts."""

    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "auth_provider",
        "role",
        "is_active",
        "date_joined",
    )
    list_filter = ("role", "auth_provider", "is_active", "is_staff", "date_joined")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Identity", {"fields": ("first_name", "last_name", "email", "google_id", "auth_provider")}),
        (
            "Pictures",
            {"fields": ("profile_picture", "profile_picture_key", "google_profile_picture")},
        ),
        ("Status", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "first_name", "last_name", "password1", "password2"),
            },
        ),
    )
    readonly_fields = ("date_joined", "last_login")
