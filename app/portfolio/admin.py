from django.contrib import admin

from portfolio.models import Project, Skill


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "owner__username", "owner__email")
    raw_id_fields = ("owner",)


@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "level", "owner")
    list_filter = ("category", "level")
    search_fields = ("name", "owner__username")
    raw_id_fields = ("owner",)
