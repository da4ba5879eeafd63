"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /schema/                       - OpenAPI schema (YAML)
    /health/                       - Health check endpoint (for load balancers, Docker)
    /django-admin/                 - Django admin interface
    /api/v1/auth/                  - Registration, login, JWT, Google sign-in, profile
    /api/v1/users/                 - User search and public profiles
        {id}/projects/, {id}/skills/ - A user's published portfolio
    /api/v1/projects/, skills/     - Portfolio CRUD
    /api/v1/connections/           - Connection requests and connections
    /api/v1/chat/                  - Conversations and messages (realtime: ws/chat/)
    /api/v1/files/                 - Object storage uploads and presigned URLs
    /api/v1/roadmaps/              - Skill roadmaps and progress
    /api/v1/admin/                 - Admin console (admin role)

Each app's urls.py documents its own endpoints.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from authentication.urls import user_urlpatterns
from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication
    path("auth/", include("authentication.urls")),
    path("accounts/", include("allauth.urls")),
    # User directory
    path("users/", include((user_urlpatterns, "users"))),
    # Portfolio (projects/, skills/, users/{id}/projects|skills/)
    path("", include("portfolio.urls")),
    # Social
    path("connections/", include("connections.urls")),
    path("chat/", include("chat.urls")),
    # Files
    path("files/", include("media.urls")),
    # Roadmaps
    path("roadmaps/", include("roadmaps.urls")),
    # Admin console
    path("admin/", include("console.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Django admin
    path("django-admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Portfolio Admin"
admin.site.site_title = "Portfolio Admin"
admin.site.index_title = "Data management"
