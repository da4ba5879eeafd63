"""
Admin console views.

Every endpoint requires an active account with the admin role: anonymous
requests get 401, other users 403.

URL structure (prefix /api/v1/admin/):
    users/                      GET     Users (?page, limit=20, search, role)
    users/{id}/                 GET     User with content counts
                                DELETE  Deactivate (not yourself)
    users/{id}/role/            PATCH   {role: user|admin}
    users/{id}/status/          PATCH   {is_active}
    roadmaps/                   GET     All roadmaps (?search) with task counts
                                POST    Create roadmap
    roadmaps/{id}/              PATCH   Update roadmap
                                DELETE  Delete roadmap without tasks
    roadmaps/{id}/tasks/        GET     Tasks by order_index
                                POST    Add task
    tasks/{id}/                 PATCH   Update task
                                DELETE  Delete task
    skills/                     GET     Skills of all users (?search, category, page, limit=50)
    stats/                      GET     Dashboard counters
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsAdminRole
from authentication.serializers import UserSerializer
from console.serializers import (
    AdminSkillSerializer,
    AdminUserDetailSerializer,
    AdminUserListSerializer,
    RoadmapInputSerializer,
    RoleUpdateSerializer,
    StatsSerializer,
    StatusUpdateSerializer,
    TaskInputSerializer,
)
from console.services import RoadmapAdminService, SkillAdminService, StatsService, UserAdminService
from core.helpers import parse_page_params
from roadmaps.serializers import RoadmapTaskSerializer, SkillRoadmapSerializer


def _failure(result):
    return Response(result.to_response(), status=result.status_code)


class ConsoleView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]


# =============================================================================
# User Management
# =============================================================================


class UserListView(ConsoleView):
    @extend_schema(
        operation_id="admin_users_list",
        summary="List users",
        parameters=[
            OpenApiParameter("page", OpenApiTypes.INT),
            OpenApiParameter("limit", OpenApiTypes.INT, description="Defaults to 20"),
            OpenApiParameter("search", OpenApiTypes.STR),
            OpenApiParameter("role", OpenApiTypes.STR, enum=["user", "admin"]),
        ],
        responses={200: AdminUserListSerializer},
        tags=["Admin"],
    )
    def get(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=20, max_limit=100)
        data = UserAdminService.list_users(
            page=page,
            limit=limit,
            search=request.query_params.get("search"),
            role=request.query_params.get("role"),
        )
        return Response(AdminUserListSerializer(data).data)


class UserDetailView(ConsoleView):
    @extend_schema(
        operation_id="admin_users_retrieve",
        summary="Get user",
        responses={200: AdminUserDetailSerializer, 404: OpenApiResponse(description="User not found")},
        tags=["Admin"],
    )
    def get(self, request, user_id):
        result = UserAdminService.get_user(user_id)
        if not result.success:
            return _failure(result)
        return Response(AdminUserDetailSerializer(result.data).data)

    @extend_schema(
        operation_id="admin_users_delete",
        summary="Deactivate user",
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Cannot delete your own account"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Admin"],
    )
    def delete(self, request, user_id):
        result = UserAdminService.deactivate(request.user, user_id)
        if not result.success:
            return _failure(result)
        return Response(UserSerializer(result.data).data)


class UserRoleView(ConsoleView):
    @extend_schema(
        operation_id="admin_users_role",
        summary="Change user role",
        request=RoleUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Invalid role"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Admin"],
    )
    def patch(self, request, user_id):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = UserAdminService.set_role(request.user, user_id, serializer.validated_data["role"])
        if not result.success:
            return _failure(result)
        return Response(UserSerializer(result.data).data)


class UserStatusView(ConsoleView):
    @extend_schema(
        operation_id="admin_users_status",
        summary="Activate or deactivate user",
        request=StatusUpdateSerializer,
        responses={200: UserSerializer, 404: OpenApiResponse(description="User not found")},
        tags=["Admin"],
    )
    def patch(self, request, user_id):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = UserAdminService.set_active(request.user, user_id, serializer.validated_data["is_active"])
        if not result.success:
            return _failure(result)
        return Response(UserSerializer(result.data).data)


# =============================================================================
# Roadmap & Task Authoring
# =============================================================================


class RoadmapListCreateView(ConsoleView):
    @extend_schema(
        operation_id="admin_roadmaps_list",
        summary="List roadmaps",
        parameters=[OpenApiParameter("search", OpenApiTypes.STR)],
        responses={200: SkillRoadmapSerializer(many=True)},
        tags=["Admin - Roadmaps"],
    )
    def get(self, request):
        roadmaps = RoadmapAdminService.list_roadmaps(request.query_params.get("search"))
        return Response(SkillRoadmapSerializer(roadmaps, many=True).data)

    @extend_schema(
        operation_id="admin_roadmaps_create",
        summary="Create roadmap",
        request=RoadmapInputSerializer,
        responses={
            201: SkillRoadmapSerializer,
            400: OpenApiResponse(description="Name, description and category are required"),
        },
        tags=["Admin - Roadmaps"],
    )
    def post(self, request):
        serializer = RoadmapInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RoadmapAdminService.create_roadmap(**serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(SkillRoadmapSerializer(result.data).data, status=status.HTTP_201_CREATED)


class RoadmapDetailView(ConsoleView):
    @extend_schema(
        operation_id="admin_roadmaps_update",
        summary="Update roadmap",
        request=RoadmapInputSerializer,
        responses={200: SkillRoadmapSerializer, 404: OpenApiResponse(description="Roadmap not found")},
        tags=["Admin - Roadmaps"],
    )
    def patch(self, request, roadmap_id):
        serializer = RoadmapInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        result = RoadmapAdminService.update_roadmap(roadmap_id, **serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(SkillRoadmapSerializer(result.data).data)

    @extend_schema(
        operation_id="admin_roadmaps_delete",
        summary="Delete roadmap",
        responses={
            204: None,
            400: OpenApiResponse(description="Roadmap still has tasks"),
            404: OpenApiResponse(description="Roadmap not found"),
        },
        tags=["Admin - Roadmaps"],
    )
    def delete(self, request, roadmap_id):
        result = RoadmapAdminService.delete_roadmap(roadmap_id)
        if not result.success:
            return _failure(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoadmapTaskListCreateView(ConsoleView):
    @extend_schema(
        operation_id="admin_tasks_list",
        summary="List roadmap tasks",
        responses={200: RoadmapTaskSerializer(many=True), 404: OpenApiResponse(description="Roadmap not found")},
        tags=["Admin - Roadmaps"],
    )
    def get(self, request, roadmap_id):
        result = RoadmapAdminService.list_tasks(roadmap_id)
        if not result.success:
            return _failure(result)
        return Response(RoadmapTaskSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="admin_tasks_create",
        summary="Add task",
        request=TaskInputSerializer,
        responses={
            201: RoadmapTaskSerializer,
            400: OpenApiResponse(description="Title missing"),
            404: OpenApiResponse(description="Roadmap not found"),
            409: OpenApiResponse(description="Order index already used"),
        },
        tags=["Admin - Roadmaps"],
    )
    def post(self, request, roadmap_id):
        serializer = TaskInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RoadmapAdminService.create_task(roadmap_id, **serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(RoadmapTaskSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TaskDetailView(ConsoleView):
    @extend_schema(
        operation_id="admin_tasks_update",
        summary="Update task",
        request=TaskInputSerializer,
        responses={
            200: RoadmapTaskSerializer,
            404: OpenApiResponse(description="Task not found"),
            409: OpenApiResponse(description="Order index already used"),
        },
        tags=["Admin - Roadmaps"],
    )
    def patch(self, request, task_id):
        serializer = TaskInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        result = RoadmapAdminService.update_task(task_id, **serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(RoadmapTaskSerializer(result.data).data)

    @extend_schema(
        operation_id="admin_tasks_delete",
        summary="Delete task",
        responses={204: None, 404: OpenApiResponse(description="Task not found")},
        tags=["Admin - Roadmaps"],
    )
    def delete(self, request, task_id):
        result = RoadmapAdminService.delete_task(task_id)
        if not result.success:
            return _failure(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Content & Stats
# =============================================================================


class SkillListView(ConsoleView):
    @extend_schema(
        operation_id="admin_skills_list",
        summary="List skills of all users",
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR),
            OpenApiParameter("category", OpenApiTypes.STR),
            OpenApiParameter("page", OpenApiTypes.INT),
            OpenApiParameter("limit", OpenApiTypes.INT, description="Defaults to 50"),
        ],
        responses={200: AdminSkillSerializer(many=True)},
        tags=["Admin"],
    )
    def get(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=50, max_limit=100)
        skills = SkillAdminService.list_skills(
            search=request.query_params.get("search"),
            category=request.query_params.get("category"),
            page=page,
            limit=limit,
        )
        return Response(AdminSkillSerializer(skills, many=True).data)


class StatsView(ConsoleView):
    @extend_schema(
        operation_id="admin_stats",
        summary="Dashboard statistics",
        responses={200: StatsSerializer},
        tags=["Admin"],
    )
    def get(self, request):
        return Response(StatsService.dashboard())
