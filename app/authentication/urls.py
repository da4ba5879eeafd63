"""
URL configuration for authentication app.

Two pattern lists are exported:
    urlpatterns       - mounted at /api/v1/auth/
    user_urlpatterns  - mounted at /api/v1/users/

See views.py for the full endpoint table.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.views import (
    ContactView,
    GoogleAuthUrlView,
    GoogleLoginView,
    LoginView,
    LogoutView,
    MeView,
    PasswordChangeView,
    ProfilePictureView,
    PublicProfileView,
    RegisterView,
    RevertGooglePictureView,
    UserSearchView,
)

app_name = "authentication"

urlpatterns = [
    # Local authentication
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    # Google sign-in
    path("google/url/", GoogleAuthUrlView.as_view(), name="google-url"),
    path("google/", GoogleLoginView.as_view(), name="google-login"),
    # Current user
    path("me/", MeView.as_view(), name="me"),
    path("me/picture/", ProfilePictureView.as_view(), name="me-picture"),
    path(
        "me/picture/revert-google/",
        RevertGooglePictureView.as_view(),
        name="me-picture-revert-google",
    ),
    path("me/password/", PasswordChangeView.as_view(), name="me-password"),
    # Contact form
    path("contact/", ContactView.as_view(), name="contact"),
]

user_urlpatterns = [
    path("search/", UserSearchView.as_view(), name="user-search"),
    path("<int:user_id>/", PublicProfileView.as_view(), name="user-detail"),
]
