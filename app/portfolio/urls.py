"""
URL configuration for portfolio app.

Mounted at /api/v1/. See views.py for the endpoint table.
"""

from django.urls import path
from rest_framework.routers import SimpleRouter

from portfolio.views import ProjectViewSet, SkillViewSet, UserProjectListView, UserSkillListView

app_name = "portfolio"

router = SimpleRouter()
router.register("projects", ProjectViewSet, basename="project")
router.register("skills", SkillViewSet, basename="skill")

urlpatterns = [
    path("users/<int:user_id>/projects/", UserProjectListView.as_view(), name="user-projects"),
    path("users/<int:user_id>/skills/", UserSkillListView.as_view(), name="user-skills"),
    *router.urls,
]
