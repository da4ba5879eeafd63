# Generated manually - Initial user model

from django.db import migrations, models

import authentication.managers


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                (
                    "username",
                    models.CharField(
                        blank=True,
                        help_text="Local login name; empty for Google-only accounts",
                        max_length=50,
                        null=True,
                        unique=True,
                    ),
                ),
                ("email", models.EmailField(blank=True, max_length=254, null=True, unique=True)),
                ("google_id", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                (
                    "auth_provider",
                    models.CharField(
                        choices=[("local", "Local"), ("google", "Google")],
                        default="local",
                        max_length=20,
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[("user", "User"), ("admin", "Admin")],
                        db_index=True,
                        default="user",
                        max_length=20,
                    ),
                ),
                ("profile_picture", models.URLField(blank=True, max_length=500, null=True)),
                ("profile_picture_key", models.CharField(blank=True, max_length=500, null=True)),
                ("google_profile_picture", models.URLField(blank=True, max_length=500, null=True)),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Whether this user account is active. Deselect instead of deleting.",
                    ),
                ),
                (
                    "is_staff",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the user can access the Django admin site.",
                    ),
                ),
                ("date_joined", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "ordering": ["-date_joined"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("username__isnull", False), ("google_id__isnull", False), _connector="OR"),
                        name="user_has_local_or_google_identity",
                    ),
                ],
            },
            managers=[
                ("objects", authentication.managers.UserManager()),
            ],
        ),
    ]
