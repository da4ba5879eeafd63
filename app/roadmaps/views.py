"""
Skill roadmap views.

URL structure (prefix /api/v1/roadmaps/):
    ""                                  GET    Active roadmaps (by name, with task count)
    {id}/                               GET    Roadmap with ordered tasks
    {id}/start/                         POST   Start the roadmap
    mine/                               GET    My roadmaps with progress percentage
    mine/{id}/                          GET    Detailed progress
    mine/{id}/final-project/            POST   Submit final project (completes roadmap)
    progress/{id}/                      PATCH  Update task status
    progress/{id}/certificates/         POST   Add certificate (optional file)
    progress/{id}/projects/             POST   Add task project
    progress/{id}/projects/link/        POST   Copy a portfolio project onto the task

Lists are returned whole; a roadmap catalog and a user's enrollments are
small.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from roadmaps.serializers import (
    CertificateCreateSerializer,
    FinalProjectSerializer,
    LinkProjectSerializer,
    SkillRoadmapDetailSerializer,
    SkillRoadmapSerializer,
    SubmissionSerializer,
    TaskCertificateSerializer,
    TaskProgressStatusSerializer,
    TaskProjectSerializer,
    TaskStatusUpdateSerializer,
    UserRoadmapDetailSerializer,
    UserRoadmapSerializer,
)
from roadmaps.services import ProgressService, RoadmapService


def _failure(result):
    return Response(result.to_response(), status=result.status_code)


class RoadmapViewSet(viewsets.ViewSet):
    """Roadmap catalog."""

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="list_roadmaps",
        summary="List roadmaps",
        responses={200: SkillRoadmapSerializer(many=True)},
        tags=["Roadmaps"],
    )
    def list(self, request):
        return Response(SkillRoadmapSerializer(RoadmapService.active_roadmaps(), many=True).data)

    @extend_schema(
        operation_id="get_roadmap",
        summary="Get roadmap with tasks",
        responses={
            200: SkillRoadmapDetailSerializer,
            404: OpenApiResponse(description="Roadmap not found"),
        },
        tags=["Roadmaps"],
    )
    def retrieve(self, request, pk=None):
        result = RoadmapService.get_roadmap(int(pk))
        if not result.success:
            return _failure(result)
        return Response(SkillRoadmapDetailSerializer(result.data).data)

    @extend_schema(
        operation_id="start_roadmap",
        summary="Start roadmap",
        request=None,
        responses={
            201: UserRoadmapSerializer,
            400: OpenApiResponse(description="Already started"),
            404: OpenApiResponse(description="Roadmap not found"),
        },
        tags=["Roadmaps"],
    )
    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        result = ProgressService.start_roadmap(request.user, int(pk))
        if not result.success:
            return _failure(result)
        return Response(UserRoadmapSerializer(result.data).data, status=status.HTTP_201_CREATED)


class UserRoadmapViewSet(viewsets.ViewSet):
    """The current user's roadmap enrollments."""

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="list_my_roadmaps",
        summary="List my roadmaps",
        responses={200: UserRoadmapSerializer(many=True)},
        tags=["Roadmaps - Progress"],
    )
    def list(self, request):
        return Response(UserRoadmapSerializer(ProgressService.user_roadmaps(request.user), many=True).data)

    @extend_schema(
        operation_id="get_my_roadmap",
        summary="Get roadmap progress",
        responses={
            200: UserRoadmapDetailSerializer,
            404: OpenApiResponse(description="User roadmap not found"),
        },
        tags=["Roadmaps - Progress"],
    )
    def retrieve(self, request, pk=None):
        result = ProgressService.get_user_roadmap(request.user, int(pk))
        if not result.success:
            return _failure(result)
        return Response(UserRoadmapDetailSerializer(result.data).data)

    @extend_schema(
        operation_id="submit_final_project",
        summary="Submit final project",
        request=SubmissionSerializer,
        responses={
            201: FinalProjectSerializer,
            400: OpenApiResponse(description="Title missing"),
            404: OpenApiResponse(description="User roadmap not found"),
        },
        tags=["Roadmaps - Progress"],
    )
    @action(detail=True, methods=["post"], url_path="final-project")
    def final_project(self, request, pk=None):
        serializer = SubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProgressService.submit_final_project(request.user, int(pk), **serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(FinalProjectSerializer(result.data).data, status=status.HTTP_201_CREATED)


class TaskProgressViewSet(viewsets.ViewSet):
    """
    Progress on a single task.

    partial_update:
        {status}: pending, in_progress or completed.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    @extend_schema(
        operation_id="update_task_status",
        summary="Update task status",
        request=TaskStatusUpdateSerializer,
        responses={
            200: TaskProgressStatusSerializer,
            400: OpenApiResponse(description="Invalid status"),
            404: OpenApiResponse(description="Task progress not found"),
        },
        tags=["Roadmaps - Progress"],
    )
    def partial_update(self, request, pk=None):
        serializer = TaskStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProgressService.update_task_status(request.user, int(pk), serializer.validated_data["status"])
        if not result.success:
            return _failure(result)
        return Response(TaskProgressStatusSerializer(result.data).data)

    @extend_schema(
        operation_id="add_task_certificate",
        summary="Add certificate",
        request=CertificateCreateSerializer,
        responses={
            201: TaskCertificateSerializer,
            400: OpenApiResponse(description="Title missing or file rejected"),
            404: OpenApiResponse(description="Task progress not found"),
            503: OpenApiResponse(description="Object storage unavailable"),
        },
        tags=["Roadmaps - Progress"],
    )
    @action(detail=True, methods=["post"], parser_classes=[MultiPartParser, FormParser, JSONParser])
    def certificates(self, request, pk=None):
        serializer = CertificateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ProgressService.add_certificate(
            request.user,
            int(pk),
            title=data.get("title"),
            issuer=data.get("issuer", ""),
            credential_url=data.get("credential_url", ""),
            issued_at=data.get("issued_at"),
            file=data.get("file"),
        )
        if not result.success:
            return _failure(result)
        return Response(TaskCertificateSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="add_task_project",
        summary="Add task project",
        request=SubmissionSerializer,
        responses={
            201: TaskProjectSerializer,
            400: OpenApiResponse(description="Title missing"),
            404: OpenApiResponse(description="Task progress not found"),
        },
        tags=["Roadmaps - Progress"],
    )
    @action(detail=True, methods=["post"])
    def projects(self, request, pk=None):
        serializer = SubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProgressService.add_task_project(request.user, int(pk), **serializer.validated_data)
        if not result.success:
            return _failure(result)
        return Response(TaskProjectSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="link_task_project",
        summary="Link portfolio project",
        request=LinkProjectSerializer,
        responses={
            201: TaskProjectSerializer,
            404: OpenApiResponse(description="Task progress or project not found"),
        },
        tags=["Roadmaps - Progress"],
    )
    @action(detail=True, methods=["post"], url_path="projects/link")
    def link_project(self, request, pk=None):
        serializer = LinkProjectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ProgressService.link_project(request.user, int(pk), serializer.validated_data["project_id"])
        if not result.success:
            return _failure(result)
        return Response(TaskProjectSerializer(result.data).data, status=status.HTTP_201_CREATED)
