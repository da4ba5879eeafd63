"""
Authentication views.

URL structure (prefix /api/v1/):
    auth/register/                      POST   Local registration
    auth/login/                         POST   Username/password login
    auth/logout/                        POST   Blacklist a refresh token
    auth/token/refresh/                 POST   Rotate JWT (simplejwt)
    auth/google/url/                    GET    Google consent URL
    auth/google/                        POST   Google sign-in (dj-rest-auth)
    auth/me/                            GET/PUT/PATCH  Current profile
    auth/me/picture/                    POST/DELETE    Profile picture
    auth/me/picture/revert-google/      POST   Use Google picture again
    auth/me/password/                   POST   Change password
    auth/contact/                       POST   Public contact form
    users/search/                       GET    Search users
    users/{id}/                         GET    Public profile

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic
    - adapters.py: Google sign-in hooks
"""

from allauth.socialaccount.providers.google.views import GoogleOAuth2Adapter
from allauth.socialaccount.providers.oauth2.client import OAuth2Client
from dj_rest_auth.registration.views import SocialLoginView
from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.serializers import (
    AuthResponseSerializer,
    ContactSerializer,
    GoogleAuthUrlSerializer,
    LoginSerializer,
    LogoutSerializer,
    PasswordChangeSerializer,
    ProfilePictureSerializer,
    ProfileUpdateSerializer,
    PublicUserSerializer,
    RegisterSerializer,
    UserSearchResultSerializer,
    UserSerializer,
)
from authentication.services import (
    AuthService,
    ContactService,
    GoogleIdentityService,
    ProfileService,
    UserDirectoryService,
)
from core.helpers import parse_page_params


def _auth_payload(user):
    return {"user": UserSerializer(user).data, **AuthService.issue_tokens(user)}


# =============================================================================
# Local Authentication Views
# =============================================================================


class RegisterView(APIView):
    """Create a local account and return a JWT pair."""

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register",
        request=RegisterSerializer,
        responses={
            201: AuthResponseSerializer,
            400: OpenApiResponse(description="Missing field or password too short"),
            409: OpenApiResponse(description="Username or e-mail already exists"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.register(**serializer.validated_data)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        return Response(_auth_payload(result.data), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Exchange username and password for a JWT pair."""

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Log in",
        request=LoginSerializer,
        responses={
            200: AuthResponseSerializer,
            401: OpenApiResponse(description="Invalid credentials"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.login(request=request, **serializer.validated_data)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        return Response(_auth_payload(result.data))


class LogoutView(APIView):
    """Blacklist the given refresh token."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_logout",
        summary="Log out",
        request=LogoutSerializer,
        responses={205: None, 400: OpenApiResponse(description="Invalid token")},
        tags=["Auth"],
    )
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data["refresh"]).blacklist()
        except TokenError as e:
            return Response(
                {"success": False, "error": str(e), "error_code": "INVALID_TOKEN"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(status=status.HTTP_205_RESET_CONTENT)


# =============================================================================
# Google Sign-In Views
# =============================================================================


class GoogleAuthUrlView(APIView):
    """Return the Google consent screen URL for the web client."""

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_google_url",
        summary="Get Google sign-in URL",
        responses={
            200: GoogleAuthUrlSerializer,
            503: OpenApiResponse(description="Google sign-in not configured"),
        },
        tags=["Auth"],
    )
    def get(self, request):
        result = GoogleIdentityService.authorization_url(state=request.query_params.get("state"))
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response({"auth_url": result.data})


@extend_schema(
    summary="Sign in with Google",
    description=(
        "Exchange a Google authorization code (web) or access token (mobile) "
        "for JWT tokens. Existing accounts are matched by Google id, then by "
        "e-mail; otherwise a new account is created."
    ),
    tags=["Auth"],
)
class GoogleLoginView(SocialLoginView):
    """
    Google OAuth2 sign-in.

    Request body:
        {"code": "authorization_code"} or {"access_token": "google_access_token"}

    Returns:
        {"access": "...", "refresh": "...", "user": {...}}
    """

    adapter_class = GoogleOAuth2Adapter
    client_class = OAuth2Client

    @property
    def callback_url(self):
        return settings.GOOGLE_REDIRECT_URI


# =============================================================================
# Profile & Account Management Views
# =============================================================================


class MeView(APIView):
    """
    Current user's profile.

    GET: Full profile
    PUT: Update with first_name and last_name required
    PATCH: Update any subset of first_name, last_name, username, email
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_me_retrieve",
        summary="Get current user",
        responses={200: UserSerializer},
        tags=["Auth - Profile"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="auth_me_update",
        summary="Update profile",
        request=ProfileUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Missing or blank field"),
            409: OpenApiResponse(description="Username or e-mail already in use"),
        },
        tags=["Auth - Profile"],
    )
    def put(self, request):
        return self._update(request, partial=False)

    @extend_schema(
        operation_id="auth_me_partial_update",
        summary="Partially update profile",
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        tags=["Auth - Profile"],
    )
    def patch(self, request):
        return self._update(request, partial=True)

    def _update(self, request, partial):
        serializer = ProfileUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        result = ProfileService.update_profile(
            request.user,
            serializer.validated_data,
            partial=partial,
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(UserSerializer(result.data).data)


class ProfilePictureView(APIView):
    """
    Upload (POST) or remove (DELETE) the profile picture.

    Removing falls back to the Google picture when the account has one.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="auth_me_picture_upload",
        summary="Upload profile picture",
        request=ProfilePictureSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Missing file, not an image, or over 5MB"),
            503: OpenApiResponse(description="Object storage unavailable"),
        },
        tags=["Auth - Profile"],
    )
    def post(self, request):
        result = ProfileService.upload_picture(request.user, request.FILES.get("image"))
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(UserSerializer(result.data).data)

    @extend_schema(
        operation_id="auth_me_picture_delete",
        summary="Remove profile picture",
        responses={200: UserSerializer},
        tags=["Auth - Profile"],
    )
    def delete(self, request):
        result = ProfileService.remove_picture(request.user)
        return Response(UserSerializer(result.data).data)


class RevertGooglePictureView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_me_picture_revert_google",
        summary="Use Google profile picture",
        request=None,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="No Google picture on this account"),
        },
        tags=["Auth - Profile"],
    )
    def post(self, request):
        result = ProfileService.revert_to_google_picture(request.user)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(UserSerializer(result.data).data)


class PasswordChangeView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser]

    @extend_schema(
        operation_id="auth_me_password_change",
        summary="Change password",
        request=PasswordChangeSerializer,
        responses={
            200: OpenApiResponse(description="Password changed"),
            400: OpenApiResponse(description="Too short or no local password"),
            401: OpenApiResponse(description="Current password is incorrect"),
        },
        tags=["Auth - Profile"],
    )
    def post(self, request):
        serializer = PasswordChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.change_password(request.user, **serializer.validated_data)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response({"success": True, "message": "Password changed successfully"})


class ContactView(APIView):
    """Public contact form; the message is e-mailed asynchronously."""

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_contact",
        summary="Send contact message",
        request=ContactSerializer,
        responses={
            202: OpenApiResponse(description="Message queued"),
            400: OpenApiResponse(description="Missing field or invalid e-mail"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ContactService.submit(
            name=data.get("name", ""),
            email=data.get("email", ""),
            subject=data.get("subject", ""),
            message=data.get("message", ""),
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(
            {"success": True, "message": "Message sent successfully"},
            status=status.HTTP_202_ACCEPTED,
        )


# =============================================================================
# User Directory Views
# =============================================================================


class UserSearchView(APIView):
    """Search users by first name, last name, username or full name."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_search",
        summary="Search users",
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, description="At least 2 characters"),
            OpenApiParameter("page", OpenApiTypes.INT),
            OpenApiParameter("limit", OpenApiTypes.INT),
        ],
        responses={200: UserSearchResultSerializer},
        tags=["Auth - Users"],
    )
    def get(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=10, max_limit=50)
        results = UserDirectoryService.search(request.query_params.get("q"), page, limit)
        return Response(UserSearchResultSerializer(results).data)


class PublicProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_retrieve",
        summary="Get public profile",
        responses={200: PublicUserSerializer, 404: OpenApiResponse(description="User not found")},
        tags=["Auth - Users"],
    )
    def get(self, request, user_id):
        result = UserDirectoryService.get_public_profile(user_id)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(PublicUserSerializer(result.data).data)
