"""
Serializers for portfolio projects and skills.
"""

from rest_framework import serializers

from portfolio.models import Project, Skill


class ProjectSerializer(serializers.ModelSerializer):
    owner = serializers.HiddenField(default=serializers.CurrentUserDefault())
    owner_id = serializers.IntegerField(read_only=True)
    technologies = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )

    class Meta:
        model = Project
        fields = [
            "id",
            "owner",
            "owner_id",
            "title",
            "description",
            "content",
            "technologies",
            "demo_url",
            "github_url",
            "status",
            "image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "image_url", "created_at", "updated_at"]


class PublicProjectSerializer(serializers.ModelSerializer):
    """Published project as shown to everyone, with the owner's display name."""

    owner_id = serializers.IntegerField(read_only=True)
    owner_name = serializers.CharField(source="owner.get_full_name", read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "owner_id",
            "owner_name",
            "title",
            "description",
            "content",
            "technologies",
            "demo_url",
            "github_url",
            "image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProjectImageSerializer(serializers.Serializer):
    image = serializers.ImageField(help_text="image/*")


class SkillSerializer(serializers.ModelSerializer):
    owner = serializers.HiddenField(default=serializers.CurrentUserDefault())
    owner_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Skill
        fields = [
            "id",
            "owner",
            "owner_id",
            "name",
            "category",
            "level",
            "description",
            "icon",
            "color",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
