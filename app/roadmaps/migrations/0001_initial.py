# Generated manually - Skill roadmaps, tasks and per-user progress

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def timestamps():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        (
            "created_at",
            models.DateTimeField(
                auto_now_add=True, db_index=True, help_text="Timestamp when this record was created"
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified"),
        ),
    ]


def submission_fields():
    return [
        ("title", models.CharField(max_length=200)),
        ("description", models.TextField(blank=True, default="")),
        ("github_url", models.URLField(blank=True, default="", max_length=500)),
        ("demo_url", models.URLField(blank=True, default="", max_length=500)),
        ("technologies", models.JSONField(blank=True, default=list)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("portfolio", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SkillRoadmap",
            fields=[
                *timestamps(),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("category", models.CharField(db_index=True, max_length=50)),
                ("icon", models.CharField(default="fas fa-code", max_length=100)),
                ("color", models.CharField(default="#3B82F6", max_length=20)),
                ("estimated_duration", models.CharField(blank=True, default="", max_length=50)),
                (
                    "difficulty",
                    models.CharField(
                        choices=[
                            ("beginner", "Beginner"),
                            ("intermediate", "Intermediate"),
                            ("advanced", "Advanced"),
                        ],
                        default="intermediate",
                        max_length=20,
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="RoadmapTask",
            fields=[
                *timestamps(),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("order_index", models.PositiveIntegerField(default=0)),
                ("estimated_hours", models.PositiveIntegerField(blank=True, null=True)),
                ("resources", models.JSONField(blank=True, default=list)),
                ("prerequisites", models.JSONField(blank=True, default=list)),
                (
                    "roadmap",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to="roadmaps.skillroadmap",
                    ),
                ),
            ],
            options={
                "ordering": ["roadmap", "order_index"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("roadmap", "order_index"), name="roadmap_task_unique_order"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserRoadmap",
            fields=[
                *timestamps(),
                (
                    "status",
                    models.CharField(
                        choices=[("in_progress", "In progress"), ("completed", "Completed")],
                        db_index=True,
                        default="in_progress",
                        max_length=20,
                    ),
                ),
                ("started_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "roadmap",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="roadmaps.skillroadmap",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="user_roadmaps",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("user", "roadmap"), name="user_roadmap_unique"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserTaskProgress",
            fields=[
                *timestamps(),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("in_progress", "In progress"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "task",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="progress_entries",
                        to="roadmaps.roadmaptask",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="task_progress",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user_roadmap",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="task_progress",
                        to="roadmaps.userroadmap",
                    ),
                ),
            ],
            options={
                "ordering": ["task__order_index"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(fields=("user_roadmap", "task"), name="task_progress_unique_task"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TaskCertificate",
            fields=[
                *timestamps(),
                ("title", models.CharField(max_length=200)),
                ("issuer", models.CharField(blank=True, default="", max_length=200)),
                ("credential_url", models.URLField(blank=True, default="", max_length=500)),
                ("file_url", models.URLField(blank=True, max_length=500, null=True)),
                ("file_key", models.CharField(blank=True, max_length=500, null=True)),
                ("issued_at", models.DateField(blank=True, null=True)),
                (
                    "progress",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="certificates",
                        to="roadmaps.usertaskprogress",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="TaskProject",
            fields=[
                *timestamps(),
                *submission_fields(),
                (
                    "progress",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="projects",
                        to="roadmaps.usertaskprogress",
                    ),
                ),
                (
                    "source_project",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="roadmap_task_links",
                        to="portfolio.project",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="RoadmapFinalProject",
            fields=[
                *timestamps(),
                *submission_fields(),
                (
                    "user_roadmap",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="final_project",
                        to="roadmaps.userroadmap",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
    ]
