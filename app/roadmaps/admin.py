from django.contrib import admin

from roadmaps.models import (
    RoadmapFinalProject,
    RoadmapTask,
    SkillRoadmap,
    TaskCertificate,
    TaskProject,
    UserRoadmap,
    UserTaskProgress,
)


class RoadmapTaskInline(admin.TabularInline):
    model = RoadmapTask
    extra = 0
    fields = ("order_index", "title", "estimated_hours")
    ordering = ("order_index",)


@admin.register(SkillRoadmap)
class SkillRoadmapAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "difficulty", "is_active", "created_at")
    list_filter = ("difficulty", "is_active", "category")
    search_fields = ("name", "description")
    inlines = [RoadmapTaskInline]


class UserTaskProgressInline(admin.TabularInline):
    model = UserTaskProgress
    extra = 0
    fields = ("task", "status", "started_at", "completed_at")
    readonly_fields = ("task",)


@admin.register(UserRoadmap)
class UserRoadmapAdmin(admin.ModelAdmin):
    list_display = ("user", "roadmap", "status", "started_at", "completed_at")
    list_filter = ("status",)
    search_fields = ("user__username", "roadmap__name")
    raw_id_fields = ("user", "roadmap")
    inlines = [UserTaskProgressInline]


@admin.register(TaskCertificate)
class TaskCertificateAdmin(admin.ModelAdmin):
    list_display = ("title", "issuer", "progress", "issued_at")
    raw_id_fields = ("progress",)


@admin.register(TaskProject)
class TaskProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "progress", "source_project", "created_at")
    raw_id_fields = ("progress", "source_project")


@admin.register(RoadmapFinalProject)
class RoadmapFinalProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "user_roadmap", "created_at")
    raw_id_fields = ("user_roadmap",)
