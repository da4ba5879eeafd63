"""
URL configuration for roadmaps app.

Mounted at /api/v1/roadmaps/. See views.py for the endpoint table.
"""

from rest_framework.routers import SimpleRouter

from roadmaps.views import RoadmapViewSet, TaskProgressViewSet, UserRoadmapViewSet

app_name = "roadmaps"

router = SimpleRouter()
router.register("mine", UserRoadmapViewSet, basename="user-roadmap")
router.register("progress", TaskProgressViewSet, basename="task-progress")
router.register("", RoadmapViewSet, basename="roadmap")

urlpatterns = router.urls
