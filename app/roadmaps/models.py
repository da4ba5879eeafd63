"""
Roadmap models.

Templates (authored in the admin console):
    SkillRoadmap: A named learning path
    RoadmapTask: One step of a roadmap, ordered by an explicit order_index

Per-user progress:
    UserRoadmap: A user's enrollment in a roadmap
    UserTaskProgress: A user's status on one task, created when the roadmap starts
    TaskCertificate: Proof of completion attached to a progress row
    TaskProject: Work submitted for a task
    RoadmapFinalProject: Capstone project; submitting it completes the roadmap
"""

from django.conf import settings
from django.db import models

from core.models import BaseModel


class SkillRoadmap(BaseModel):
    """
    Learning path template.

    Fields:
        name: Display name (required)
        description: What the roadmap covers (required)
        category: Free-form grouping such as "frontend" or "backend"
        icon / color: Presentation hints for the UI
        estimated_duration: Free text, e.g. "4-6 months"
        difficulty: beginner, intermediate or advanced
        is_active: Only active roadmaps are offered to users
    """

    class Difficulty(models.TextChoices):
        BEGINNER = "beginner", "Beginner"
        INTERMEDIATE = "intermediate", "Intermediate"
        ADVANCED = "advanced", "Advanced"

    name = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=50, db_index=True)
    icon = models.CharField(max_length=100, default="fas fa-code")
    color = models.CharField(max_length=20, default="#3B82F6")
    estimated_duration = models.CharField(max_length=50, blank=True, default="")
    difficulty = models.CharField(
        max_length=20,
        choices=Difficulty.choices,
        default=Difficulty.INTERMEDIATE,
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta(BaseModel.Meta):
        ordering = ["name"]

    def __str__(self):
        return self.name


class RoadmapTask(BaseModel):
    """
    One step of a roadmap.

    order_index is explicit and unique within a roadmap; prerequisites holds
    the order indexes of tasks that should be done first.
    """

    roadmap = models.ForeignKey(
        SkillRoadmap,
        on_delete=models.CASCADE,
        related_name="tasks",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    order_index = models.PositiveIntegerField(default=0)
    estimated_hours = models.PositiveIntegerField(null=True, blank=True)
    resources = models.JSONField(default=list, blank=True)
    prerequisites = models.JSONField(default=list, blank=True)

    class Meta(BaseModel.Meta):
        ordering = ["roadmap", "order_index"]
        constraints = [
            models.UniqueConstraint(
                fields=["roadmap", "order_index"],
                name="roadmap_task_unique_order",
            ),
        ]

    def __str__(self):
        return f"{self.order_index}. {self.title}"


class UserRoadmap(BaseModel):
    """A user's enrollment in a roadmap. One per (user, roadmap)."""

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="user_roadmaps",
    )
    roadmap = models.ForeignKey(
        SkillRoadmap,
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
        db_index=True,
    )
    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        constraints = [
            models.UniqueConstraint(fields=["user", "roadmap"], name="user_roadmap_unique"),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.roadmap_id} ({self.status})"


class UserTaskProgress(BaseModel):
    """
    A user's status on one roadmap task.

    Rows are created in bulk when the roadmap is started, all ``pending``.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="task_progress",
    )
    task = models.ForeignKey(
        RoadmapTask,
        on_delete=models.CASCADE,
        related_name="progress_entries",
    )
    user_roadmap = models.ForeignKey(
        UserRoadmap,
        on_delete=models.CASCADE,
        related_name="task_progress",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta(BaseModel.Meta):
        ordering = ["task__order_index"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_roadmap", "task"],
                name="task_progress_unique_task",
            ),
        ]


class TaskCertificate(BaseModel):
    """
    Certificate for a task.

    Either a credential URL, an uploaded file (key + url in object storage),
    or both.
    """

    progress = models.ForeignKey(
        UserTaskProgress,
        on_delete=models.CASCADE,
        related_name="certificates",
    )
    title = models.CharField(max_length=200)
    issuer = models.CharField(max_length=200, blank=True, default="")
    credential_url = models.URLField(max_length=500, blank=True, default="")
    file_url = models.URLField(max_length=500, null=True, blank=True)
    file_key = models.CharField(max_length=500, null=True, blank=True)
    issued_at = models.DateField(null=True, blank=True)

    def __str__(self):
        return self.title


class Submission(BaseModel):
    """Fields shared by task projects and final projects."""

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    github_url = models.URLField(max_length=500, blank=True, default="")
    demo_url = models.URLField(max_length=500, blank=True, default="")
    technologies = models.JSONField(default=list, blank=True)

    class Meta(BaseModel.Meta):
        abstract = True

    def __str__(self):
        return self.title


class TaskProject(Submission):
    """
    Project submitted for a task.

    source_project is set when the entry was copied from a portfolio project.
    """

    progress = models.ForeignKey(
        UserTaskProgress,
        on_delete=models.CASCADE,
        related_name="projects",
    )
    source_project = models.ForeignKey(
        "portfolio.Project",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="roadmap_task_links",
    )


class RoadmapFinalProject(Submission):
    user_roadmap = models.OneToOneField(
        UserRoadmap,
        on_delete=models.CASCADE,
        related_name="final_project",
    )
