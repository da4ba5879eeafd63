"""
Authentication services.

Services:
    AuthService: Registration, login, JWT issuance, password change
    ProfileService: Profile edits and profile picture lifecycle
    GoogleIdentityService: Google authorization URL and identity/picture sync
    UserDirectoryService: User search and public profiles
    ContactService: Public contact form

Related files:
    - models.py: User
    - adapters.py: allauth hooks that call GoogleIdentityService
    - tasks.py: Contact e-mail delivery
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode

from django.conf import settings
from django.contrib.auth import authenticate
from django.db import IntegrityError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import BaseApplicationError
from core.helpers import calculate_pagination
from core.predicates import text_search
from core.services import BaseService, ServiceResult
from authentication.models import User
from media.services import get_storage_service
from media.validators import validate_image

if TYPE_CHECKING:
    from typing import Any

    from django.core.files.uploadedfile import UploadedFile


MIN_PASSWORD_LENGTH = 6
MIN_SEARCH_LENGTH = 2
GOOGLE_AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"


class AuthService(BaseService):
    """
    Local account lifecycle.

    Usage:
        result = AuthService.register(
            first_name="Ada", last_name="Lovelace",
            username="ada", password="secret1",
        )
        if result.success:
            tokens = AuthService.issue_tokens(result.data)
    """

    @classmethod
    def register(
        cls,
        first_name: str,
        last_name: str,
        username: str,
        password: str,
        email: str | None = None,
    ) -> ServiceResult[User]:
        """
        Create a local account.

        Error codes:
            VALIDATION_ERROR: Missing field (400)
            PASSWORD_TOO_SHORT: Password under six characters (400)
            USERNAME_TAKEN / EMAIL_TAKEN: Duplicate key (409)
        """
        missing = cls.validate_required(
            first_name=first_name,
            last_name=last_name,
            username=username,
            password=password,
        )
        if missing is not None:
            return missing

        username = username.strip()
        email = (email or "").strip().lower() or None

        if len(password) < MIN_PASSWORD_LENGTH:
            return ServiceResult.failure(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                error_code="PASSWORD_TOO_SHORT",
            )
        if User.objects.filter(username=username).exists():
            return ServiceResult.failure(
                "Username already exists",
                error_code="USERNAME_TAKEN",
                status=409,
            )
        if email and User.objects.filter(email=email).exists():
            return ServiceResult.failure(
                "Email already registered",
                error_code="EMAIL_TAKEN",
                status=409,
            )

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    username=username,
                    password=password,
                    email=email,
                    first_name=first_name.strip(),
                    last_name=last_name.strip(),
                    auth_provider=User.AuthProvider.LOCAL,
                )
        except IntegrityError:
            # Concurrent registration won the unique constraint
            return ServiceResult.failure(
                "Username already exists",
                error_code="USERNAME_TAKEN",
                status=409,
            )

        cls.get_logger().info(f"Registered local user {user.id} ({username})")
        return ServiceResult.success(user)

    @classmethod
    def login(cls, username: str, password: str, request=None) -> ServiceResult[User]:
        """
        Verify a username/password pair.

        Inactive accounts are rejected the same way as wrong passwords.

        Error codes:
            INVALID_CREDENTIALS (401)
        """
        if not username or not password:
            return ServiceResult.failure(
                "Username and password are required",
                error_code="VALIDATION_ERROR",
            )

        user = authenticate(request, username=username.strip(), password=password)
        if user is None:
            cls.get_logger().info(f"Failed login for username {username!r}")
            return ServiceResult.failure(
                "Invalid credentials",
                error_code="INVALID_CREDENTIALS",
                status=401,
            )
        return ServiceResult.success(user)

    @staticmethod
    def issue_tokens(user: User) -> dict[str, str]:
        """Return a fresh JWT pair for ``user``."""
        refresh = RefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}

    @classmethod
    def change_password(
        cls,
        user: User,
        current_password: str,
        new_password: str,
    ) -> ServiceResult[None]:
        """
        Change a local account's password.

        Error codes:
            VALIDATION_ERROR: Missing field (400)
            NO_LOCAL_PASSWORD: Google-only account (400)
            PASSWORD_TOO_SHORT (400)
            INVALID_CURRENT_PASSWORD (401)
        """
        missing = cls.validate_required(
            current_password=current_password,
            new_password=new_password,
        )
        if missing is not None:
            return missing

        if not user.has_usable_password():
            return ServiceResult.failure(
                "This account signs in with Google and has no password",
                error_code="NO_LOCAL_PASSWORD",
            )
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return ServiceResult.failure(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long",
                error_code="PASSWORD_TOO_SHORT",
            )
        if not user.check_password(current_password):
            return ServiceResult.failure(
                "Current password is incorrect",
                error_code="INVALID_CURRENT_PASSWORD",
                status=401,
            )

        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        cls.get_logger().info(f"User {user.id} changed password")
        return ServiceResult.success(None)


class ProfileService(BaseService):
    """
    Profile edits and profile pictures.

    Replacing or removing an uploaded picture deletes the old object on a
    best-effort basis; a storage failure there never fails the update.
    """

    EDITABLE_FIELDS = ("first_name", "last_name", "username", "email")

    @classmethod
    def update_profile(
        cls,
        user: User,
        data: dict[str, Any],
        partial: bool = False,
    ) -> ServiceResult[User]:
        """
        Update name, username and e-mail.

        A full update requires first_name and last_name. A supplied username
        must be non-empty and not used by anyone else.

        Error codes:
            VALIDATION_ERROR (400)
            USERNAME_TAKEN / EMAIL_TAKEN (409)
        """
        if not partial:
            missing = cls.validate_required(
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
            )
            if missing is not None:
                return missing

        changes: dict[str, Any] = {}
        for field_name in ("first_name", "last_name"):
            if field_name in data:
                value = (data[field_name] or "").strip()
                if not value:
                    return ServiceResult.failure(
                        f"{field_name} cannot be empty",
                        error_code="VALIDATION_ERROR",
                        errors={field_name: ["This field may not be blank."]},
                    )
                changes[field_name] = value

        if "username" in data:
            username = (data["username"] or "").strip()
            if not username:
                return ServiceResult.failure(
                    "Username cannot be empty",
                    error_code="VALIDATION_ERROR",
                    errors={"username": ["This field may not be blank."]},
                )
            if User.objects.filter(username=username).exclude(pk=user.pk).exists():
                return ServiceResult.failure(
                    "Username already exists",
                    error_code="USERNAME_TAKEN",
                    status=409,
                )
            changes["username"] = username

        if "email" in data:
            email = (data["email"] or "").strip().lower() or None
            if email and User.objects.filter(email=email).exclude(pk=user.pk).exists():
                return ServiceResult.failure(
                    "Email already registered",
                    error_code="EMAIL_TAKEN",
                    status=409,
                )
            changes["email"] = email

        if not changes:
            return ServiceResult.success(user)

        for field_name, value in changes.items():
            setattr(user, field_name, value)
        try:
            user.save(update_fields=[*changes, "updated_at"])
        except IntegrityError:
            return ServiceResult.failure(
                "Username or email already in use",
                error_code="CONFLICT",
                status=409,
            )

        cls.get_logger().info(f"User {user.id} updated profile fields {sorted(changes)}")
        return ServiceResult.success(user)

    @classmethod
    def upload_picture(cls, user: User, file: UploadedFile | None) -> ServiceResult[User]:
        """
        Store a new profile picture (image/*, 5MB max).

        Error codes:
            NO_FILE / NOT_AN_IMAGE / FILE_TOO_LARGE (400)
            STORAGE_UNAVAILABLE (503)
        """
        storage = get_storage_service()
        try:
            validate_image(file)
            stored = storage.upload(file, user_id=user.id)
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        old_key = user.profile_picture_key
        user.profile_picture = stored.url
        user.profile_picture_key = stored.key
        user.save(update_fields=["profile_picture", "profile_picture_key", "updated_at"])

        if old_key and old_key != stored.key:
            storage.delete_best_effort(old_key)

        cls.get_logger().info(f"User {user.id} uploaded profile picture {stored.key}")
        return ServiceResult.success(user)

    @classmethod
    def remove_picture(cls, user: User) -> ServiceResult[User]:
        """Drop the uploaded picture, falling back to the Google one if any."""
        old_key = user.profile_picture_key
        user.profile_picture = user.google_profile_picture or None
        user.profile_picture_key = None
        user.save(update_fields=["profile_picture", "profile_picture_key", "updated_at"])

        get_storage_service().delete_best_effort(old_key)
        return ServiceResult.success(user)

    @classmethod
    def revert_to_google_picture(cls, user: User) -> ServiceResult[User]:
        """
        Show the Google picture again.

        Error codes:
            NO_GOOGLE_PICTURE (400)
        """
        if not user.google_profile_picture:
            return ServiceResult.failure(
                "No Google profile picture available",
                error_code="NO_GOOGLE_PICTURE",
            )
        return cls.remove_picture(user)


class GoogleIdentityService(BaseService):
    """
    Google sign-in support.

    The OAuth exchange itself runs through dj-rest-auth's SocialLoginView
    and allauth; this service builds the consent URL and applies the
    matching rules for identity and pictures.
    """

    FALLBACK_FIRST_NAME = "Unknown"
    FALLBACK_LAST_NAME = "User"

    @classmethod
    def authorization_url(cls, state: str | None = None) -> ServiceResult[str]:
        """
        Build the Google consent screen URL.

        Error codes:
            GOOGLE_NOT_CONFIGURED (503)
        """
        if not settings.GOOGLE_CLIENT_ID:
            return ServiceResult.failure(
                "Google sign-in is not configured",
                error_code="GOOGLE_NOT_CONFIGURED",
                status=503,
            )

        params = {
            "client_id": settings.GOOGLE_CLIENT_ID,
            "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return ServiceResult.success(f"{GOOGLE_AUTHORIZATION_URL}?{urlencode(params)}")

    @classmethod
    def names_from_profile(cls, data: dict[str, Any]) -> tuple[str, str]:
        """First/last name from Google profile data with fallbacks."""
        first_name = (data.get("given_name") or data.get("first_name") or "").strip()
        last_name = (data.get("family_name") or data.get("last_name") or "").strip()
        return first_name or cls.FALLBACK_FIRST_NAME, last_name or cls.FALLBACK_LAST_NAME

    @classmethod
    def apply_google_identity(
        cls,
        user: User,
        google_id: str,
        picture: str | None,
        commit: bool = True,
    ) -> list[str]:
        """
        Link a Google identity and sync its picture onto ``user``.

        Rules:
            - google_id is set when the account has none yet
            - google_profile_picture tracks the latest Google picture
            - profile_picture follows it unless the user uploaded their own

        Returns:
            Names of the fields that changed
        """
        changed: list[str] = []
        if not user.google_id and google_id:
            user.google_id = google_id
            changed.append("google_id")

        if picture and picture != user.google_profile_picture:
            user.google_profile_picture = picture
            changed.append("google_profile_picture")
            if not user.profile_picture_key:
                user.profile_picture = picture
                changed.append("profile_picture")
        elif picture and not user.profile_picture and not user.profile_picture_key:
            user.profile_picture = picture
            changed.append("profile_picture")

        if commit and changed and user.pk:
            user.save(update_fields=[*changed, "updated_at"])
            cls.get_logger().info(f"Synced Google identity for user {user.id}: {changed}")
        return changed


class UserDirectoryService(BaseService):
    """User search and public profile lookup."""

    SEARCH_FIELDS = ("first_name", "last_name", "username")

    @classmethod
    def search(cls, query: str | None, page: int = 1, limit: int = 10) -> dict[str, Any]:
        """
        Case-insensitive search over names, username and full name.

        Queries shorter than two characters return an empty page.

        Returns:
            {"users": [User, ...], "total", "page", "total_pages",
             "has_next", "has_previous"}
        """
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return {
                "users": [],
                **cls._page_meta(calculate_pagination(0, page, limit)),
            }

        predicate = text_search(
            query,
            cls.SEARCH_FIELDS,
            full_name=("first_name", "last_name"),
        )
        queryset = predicate.apply(User.objects.filter(is_active=True)).order_by(
            "first_name", "last_name", "id"
        )
        total = queryset.count()
        offset = (page - 1) * limit
        return {
            "users": list(queryset[offset : offset + limit]),
            **cls._page_meta(calculate_pagination(total, page, limit)),
        }

    @staticmethod
    def _page_meta(pagination: dict[str, Any]) -> dict[str, Any]:
        return {
            "total": pagination["total"],
            "page": pagination["page"],
            "total_pages": pagination["total_pages"],
            "has_next": pagination["has_next"],
            "has_previous": pagination["has_previous"],
        }

    @classmethod
    def get_public_profile(cls, user_id: int) -> ServiceResult[User]:
        user = User.objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            return ServiceResult.failure(
                "User not found",
                error_code="USER_NOT_FOUND",
                status=404,
            )
        return ServiceResult.success(user)


class ContactService(BaseService):
    """Public contact form."""

    @classmethod
    def submit(
        cls,
        name: str,
        email: str,
        subject: str,
        message: str,
    ) -> ServiceResult[None]:
        """
        Validate a contact message and queue it for e-mail delivery.

        Error codes:
            VALIDATION_ERROR: Missing field (400)

        The address format is checked by ContactSerializer.
        """
        missing = cls.validate_required(name=name, email=email, subject=subject, message=message)
        if missing is not None:
            return missing

        from authentication.tasks import send_contact_email

        send_contact_email.delay(
            name=name.strip(),
            email=email.strip(),
            subject=subject.strip(),
            message=message.strip(),
        )
        cls.get_logger().info(f"Queued contact message from {email.strip()}")
        return ServiceResult.success(None)
