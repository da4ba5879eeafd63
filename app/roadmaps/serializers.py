"""
Serializers for skill roadmaps and progress.
"""

from rest_framework import serializers

from core.helpers import percentage
from roadmaps.models import (
    RoadmapFinalProject,
    RoadmapTask,
    SkillRoadmap,
    TaskCertificate,
    TaskProject,
    UserRoadmap,
    UserTaskProgress,
)


class RoadmapTaskSerializer(serializers.ModelSerializer):
    roadmap_id = serializers.IntegerField(read_only=True)
    resources = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    prerequisites = serializers.ListField(child=serializers.IntegerField(min_value=0), required=False)

    class Meta:
        model = RoadmapTask
        fields = [
            "id",
            "roadmap_id",
            "title",
            "description",
            "order_index",
            "estimated_hours",
            "resources",
            "prerequisites",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class SkillRoadmapSerializer(serializers.ModelSerializer):
    """Roadmap with the number of tasks it contains."""

    task_count = serializers.SerializerMethodField()

    class Meta:
        model = SkillRoadmap
        fields = [
            "id",
            "name",
            "description",
            "category",
            "icon",
            "color",
            "estimated_duration",
            "difficulty",
            "is_active",
            "task_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_task_count(self, obj) -> int:
        annotated = getattr(obj, "task_count", None)
        return annotated if annotated is not None else obj.tasks.count()


class SkillRoadmapDetailSerializer(SkillRoadmapSerializer):
    tasks = RoadmapTaskSerializer(many=True, read_only=True)

    class Meta(SkillRoadmapSerializer.Meta):
        fields = [*SkillRoadmapSerializer.Meta.fields, "tasks"]


class TaskCertificateSerializer(serializers.ModelSerializer):
    class Meta:
        model = TaskCertificate
        fields = [
            "id",
            "progress_id",
            "title",
            "issuer",
            "credential_url",
            "file_url",
            "issued_at",
            "created_at",
        ]
        read_only_fields = fields


class TaskProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = TaskProject
        fields = [
            "id",
            "progress_id",
            "source_project_id",
            "title",
            "description",
            "github_url",
            "demo_url",
            "technologies",
            "created_at",
        ]
        read_only_fields = fields


class FinalProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoadmapFinalProject
        fields = [
            "id",
            "user_roadmap_id",
            "title",
            "description",
            "github_url",
            "demo_url",
            "technologies",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TaskProgressSerializer(serializers.ModelSerializer):
    task = RoadmapTaskSerializer(read_only=True)
    certificates = TaskCertificateSerializer(many=True, read_only=True)
    projects = TaskProjectSerializer(many=True, read_only=True)

    class Meta:
        model = UserTaskProgress
        fields = ["id", "status", "started_at", "completed_at", "task", "certificates", "projects"]
        read_only_fields = fields


class TaskProgressStatusSerializer(serializers.ModelSerializer):
    """Progress row without nested task details (status update response)."""

    class Meta:
        model = UserTaskProgress
        fields = ["id", "task_id", "user_roadmap_id", "status", "started_at", "completed_at"]
        read_only_fields = fields


class UserRoadmapSerializer(serializers.ModelSerializer):
    """
    Enrollment summary.

    Expects ``total_tasks`` and ``completed_tasks`` annotations
    (ProgressService.user_roadmaps).
    """

    roadmap = SkillRoadmapSerializer(read_only=True)
    total_tasks = serializers.IntegerField(read_only=True)
    completed_tasks = serializers.IntegerField(read_only=True)
    progress_percentage = serializers.SerializerMethodField()

    class Meta:
        model = UserRoadmap
        fields = [
            "id",
            "status",
            "started_at",
            "completed_at",
            "roadmap",
            "total_tasks",
            "completed_tasks",
            "progress_percentage",
        ]
        read_only_fields = fields

    def get_progress_percentage(self, obj) -> int:
        return percentage(obj.completed_tasks, obj.total_tasks)


class UserRoadmapDetailSerializer(UserRoadmapSerializer):
    task_progress = TaskProgressSerializer(many=True, read_only=True)
    final_project = serializers.SerializerMethodField()

    class Meta(UserRoadmapSerializer.Meta):
        fields = [*UserRoadmapSerializer.Meta.fields, "task_progress", "final_project"]
        read_only_fields = fields

    def get_final_project(self, obj) -> dict | None:
        # Missing reverse one-to-one raises a subclass of AttributeError.
        final_project = getattr(obj, "final_project", None)
        return FinalProjectSerializer(final_project).data if final_project else None


# =============================================================================
# Input serializers
# =============================================================================


class TaskStatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class CertificateCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    issuer = serializers.CharField(max_length=200, required=False, allow_blank=True)
    credential_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    issued_at = serializers.DateField(required=False, allow_null=True)
    file = serializers.FileField(required=False, help_text="Image, PDF or document, 10MB max")


class SubmissionSerializer(serializers.Serializer):
    """Task project or final project input."""

    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    github_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    demo_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    technologies = serializers.ListField(child=serializers.CharField(max_length=100), required=False)


class LinkProjectSerializer(serializers.Serializer):
    project_id = serializers.IntegerField()
