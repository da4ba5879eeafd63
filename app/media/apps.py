"""Django app configuration for media app."""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    """Object storage for uploads; owns no database tables."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "media"
    verbose_name = "Media"
