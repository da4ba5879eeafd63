"""
Serializers for authentication endpoints.

Input serializers only check shape; business rules (uniqueness, password
length, credential checks) live in authentication.services so the same
errors come back from every entry point.

Security:
    - Password fields are write-only
    - Public serializers never expose e-mail, google_id, storage keys or role
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Full user representation for the account owner.

    Also used by dj-rest-auth (REST_AUTH USER_DETAILS_SERIALIZER) for the
    Google login response.
    """

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "first_name",
            "last_name",
            "full_name",
            "username",
            "email",
            "auth_provider",
            "role",
            "profile_picture",
            "google_profile_picture",
            "has_custom_picture",
            "is_active",
            "date_joined",
            "updated_at",
        ]
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """User as seen by other users (search results, public profile, chat)."""

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "first_name",
            "last_name",
            "full_name",
            "username",
            "profile_picture",
            "date_joined",
        ]
        read_only_fields = fields


class AuthResponseSerializer(serializers.Serializer):
    """Login/registration response."""

    user = UserSerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()


class RegisterSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    username = serializers.CharField(max_length=50)
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Profile edit input.

    first_name and last_name are required on PUT; every field is optional
    on PATCH (enforced by ProfileService).
    """

    first_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    username = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)


class ProfilePictureSerializer(serializers.Serializer):
    image = serializers.ImageField(required=False, help_text="image/*, 5MB max")


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)


class GoogleAuthUrlSerializer(serializers.Serializer):
    auth_url = serializers.URLField()


class UserSearchResultSerializer(serializers.Serializer):
    users = PublicUserSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()


class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=254, required=False, allow_blank=True)
    subject = serializers.CharField(max_length=200, required=False, allow_blank=True)
    message = serializers.CharField(max_length=5000, required=False, allow_blank=True)
