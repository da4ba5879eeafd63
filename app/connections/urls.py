"""
URL configuration for connections app.

Mounted at /api/v1/connections/. See views.py for the endpoint table.
"""

from django.urls import path

from connections.views import (
    ConnectionDeleteView,
    ConnectionListView,
    ConnectionRequestAcceptView,
    ConnectionRequestListCreateView,
    ConnectionRequestRejectView,
    ConnectionStatusView,
)

app_name = "connections"

urlpatterns = [
    path("", ConnectionListView.as_view(), name="connection-list"),
    path("requests/", ConnectionRequestListCreateView.as_view(), name="request-list"),
    path(
        "requests/<int:request_id>/accept/",
        ConnectionRequestAcceptView.as_view(),
        name="request-accept",
    ),
    path(
        "requests/<int:request_id>/reject/",
        ConnectionRequestRejectView.as_view(),
        name="request-reject",
    ),
    path("status/<int:user_id>/", ConnectionStatusView.as_view(), name="connection-status"),
    path("<int:user_id>/", ConnectionDeleteView.as_view(), name="connection-delete"),
]
