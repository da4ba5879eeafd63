"""
URL configuration for console app.

Mounted at /api/v1/admin/. See views.py for the endpoint table.
"""

from django.urls import path

from console import views

app_name = "console"

urlpatterns = [
    path("users/", views.UserListView.as_view(), name="user-list"),
    path("users/<int:user_id>/", views.UserDetailView.as_view(), name="user-detail"),
    path("users/<int:user_id>/role/", views.UserRoleView.as_view(), name="user-role"),
    path("users/<int:user_id>/status/", views.UserStatusView.as_view(), name="user-status"),
    path("roadmaps/", views.RoadmapListCreateView.as_view(), name="roadmap-list"),
    path("roadmaps/<int:roadmap_id>/", views.RoadmapDetailView.as_view(), name="roadmap-detail"),
    path("roadmaps/<int:roadmap_id>/tasks/", views.RoadmapTaskListCreateView.as_view(), name="task-list"),
    path("tasks/<int:task_id>/", views.TaskDetailView.as_view(), name="task-detail"),
    path("skills/", views.SkillListView.as_view(), name="skill-list"),
    path("stats/", views.StatsView.as_view(), name="stats"),
]
