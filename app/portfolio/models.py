"""
Portfolio models.

Project: A showcase entry owned by one user (draft until published)
Skill: A self-assessed skill with a 1-5 level, grouped by category
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel

SKILL_LEVEL_MIN = 1
SKILL_LEVEL_MAX = 5


class Project(BaseModel):
    """
    Portfolio project.

    Fields:
        owner: User who owns the project
        title: Project name (required)
        description: Short summary
        content: Long-form write-up
        technologies: List of technology names
        demo_url / github_url: External links
        status: draft, published or archived; only published projects are public
        image_url / image_key: Cover image in object storage
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="projects",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    content = models.TextField(blank=True, default="")
    technologies = models.JSONField(default=list, blank=True)
    demo_url = models.URLField(max_length=500, blank=True, default="")
    github_url = models.URLField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    image_url = models.URLField(max_length=500, null=True, blank=True)
    image_key = models.CharField(max_length=500, null=True, blank=True)

    class Meta(BaseModel.Meta):
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="project_owner_recent_idx"),
        ]

    def __str__(self):
        return self.title


class Skill(BaseModel):
    """
    Skill entry.

    Fields:
        owner: User who owns the skill
        name: Skill name (required)
        category: Free-form grouping such as "frontend" or "tools" (required)
        level: 1 (beginner) to 5 (expert)
        icon: Font Awesome class
        color: Hex color used by the UI
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="skills",
    )
    name = models.CharField(max_length=100)
    category = models.CharField(max_length=50, db_index=True)
    level = models.PositiveSmallIntegerField(
        default=SKILL_LEVEL_MIN,
        validators=[MinValueValidator(SKILL_LEVEL_MIN), MaxValueValidator(SKILL_LEVEL_MAX)],
    )
    description = models.TextField(blank=True, default="")
    icon = models.CharField(max_length=100, default="fas fa-code")
    color = models.CharField(max_length=20, default="#3B82F6")

    class Meta(BaseModel.Meta):
        constraints = [
            models.CheckConstraint(
                condition=models.Q(level__gte=SKILL_LEVEL_MIN, level__lte=SKILL_LEVEL_MAX),
                name="skill_level_between_1_and_5",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.level}/5)"
