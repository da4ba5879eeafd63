"""
Serializers for the admin console.

Input serializers only check shape; required fields and defaults are
applied by console.services so every entry point reports the same errors.
"""

from rest_framework import serializers

from authentication.serializers import UserSerializer
from portfolio.models import Skill
from roadmaps.models import SkillRoadmap


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    pages = serializers.IntegerField()


class AdminUserListSerializer(serializers.Serializer):
    users = UserSerializer(many=True)
    pagination = PaginationSerializer()


class AdminUserDetailSerializer(UserSerializer):
    """User plus content counts (UserAdminService.get_user annotations)."""

    stats = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = [*UserSerializer.Meta.fields, "stats"]
        read_only_fields = fields

    def get_stats(self, obj) -> dict:
        return {"projects_count": obj.projects_count, "skills_count": obj.skills_count}


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.CharField()


class StatusUpdateSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class RoadmapInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True)
    icon = serializers.CharField(max_length=100, required=False)
    color = serializers.CharField(max_length=20, required=False)
    estimated_duration = serializers.CharField(max_length=50, required=False, allow_blank=True)
    difficulty = serializers.ChoiceField(choices=SkillRoadmap.Difficulty.choices, required=False)
    is_active = serializers.BooleanField(required=False)


class TaskInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    order_index = serializers.IntegerField(min_value=0, required=False)
    estimated_hours = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    resources = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    prerequisites = serializers.ListField(child=serializers.IntegerField(min_value=0), required=False)


class AdminSkillSerializer(serializers.ModelSerializer):
    owner_id = serializers.IntegerField(read_only=True)
    owner_name = serializers.CharField(source="owner.get_full_name", read_only=True)

    class Meta:
        model = Skill
        fields = [
            "id",
            "name",
            "category",
            "level",
            "description",
            "icon",
            "color",
            "owner_id",
            "owner_name",
            "created_at",
        ]
        read_only_fields = fields


class StatsSerializer(serializers.Serializer):
    users = serializers.DictField(child=serializers.IntegerField())
    roadmaps = serializers.DictField(child=serializers.IntegerField())
    content = serializers.DictField(child=serializers.IntegerField())
