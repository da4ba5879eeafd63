"""
URL configuration for chat API.

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
See views.py for the endpoint table.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from chat.views import ConversationViewSet, UnreadCountView

router = SimpleRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")

app_name = "chat"

urlpatterns = [
    path("unread-count/", UnreadCountView.as_view(), name="unread-count"),
    path("", include(router.urls)),
]
