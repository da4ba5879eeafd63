"""
ViewSets for portfolio projects and skills.

URL Structure (prefix /api/v1/):
    projects/                      GET, POST     Own projects (newest first)
    projects/{id}/                 GET, PUT, PATCH, DELETE
    projects/{id}/image/           POST          Upload cover image
    projects/public/               GET           Published projects of all users
    skills/                        GET, POST     Own skills
    skills/{id}/                   GET, PUT, PATCH, DELETE
    skills/grouped/                GET           Own skills keyed by category
    users/{id}/projects/           GET           A user's published projects
    users/{id}/skills/             GET           A user's skills

Design Decisions:
    - Owner-scoped querysets, so another user's object is a 404, not a 403
    - Storage side effects (image upload, image cleanup) go through services
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import generics, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from portfolio.filters import ProjectFilter, SkillFilter
from portfolio.models import Project, Skill
from portfolio.serializers import (
    ProjectImageSerializer,
    ProjectSerializer,
    PublicProjectSerializer,
    SkillSerializer,
)
from portfolio.services import ProjectService, SkillService

User = get_user_model()


@extend_schema_view(
    list=extend_schema(operation_id="list_projects", summary="List my projects", tags=["Portfolio - Projects"]),
    create=extend_schema(operation_id="create_project", summary="Create project", tags=["Portfolio - Projects"]),
    retrieve=extend_schema(operation_id="get_project", summary="Get project", tags=["Portfolio - Projects"]),
    update=extend_schema(operation_id="replace_project", summary="Replace project", tags=["Portfolio - Projects"]),
    partial_update=extend_schema(
        operation_id="update_project", summary="Update project", tags=["Portfolio - Projects"]
    ),
    destroy=extend_schema(operation_id="delete_project", summary="Delete project", tags=["Portfolio - Projects"]),
)
class ProjectViewSet(viewsets.ModelViewSet):
    """
    The current user's portfolio projects.

    destroy:
        Deletes the project and, best-effort, its cover image.

    image:
        Multipart upload of an image/* cover; replaces the previous one.

    public:
        Published projects of every user, newest first. No login required.
    """

    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProjectFilter

    def get_queryset(self):
        if self.action == "public":
            return Project.objects.filter(status=Project.Status.PUBLISHED).select_related("owner")
        if not self.request.user.is_authenticated:
            return Project.objects.none()
        return Project.objects.filter(owner=self.request.user)

    def get_permissions(self):
        if self.action == "public":
            return [AllowAny()]
        return super().get_permissions()

    def perform_destroy(self, instance):
        ProjectService.delete_project(instance)

    @extend_schema(
        operation_id="upload_project_image",
        summary="Upload project image",
        request=ProjectImageSerializer,
        responses={
            200: ProjectSerializer,
            400: OpenApiResponse(description="Missing file or not an image"),
            404: OpenApiResponse(description="Project not found"),
        },
        tags=["Portfolio - Projects"],
    )
    @action(detail=True, methods=["post"], parser_classes=[MultiPartParser, FormParser])
    def image(self, request, pk=None):
        project = self.get_object()
        result = ProjectService.set_image(project, request.FILES.get("image"))
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response(ProjectSerializer(result.data, context={"request": request}).data)

    @extend_schema(
        operation_id="list_public_projects",
        summary="List published projects",
        responses={200: PublicProjectSerializer(many=True)},
        tags=["Portfolio - Projects"],
    )
    @action(detail=False, methods=["get"], filter_backends=[])
    def public(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(PublicProjectSerializer(page, many=True).data)
        return Response(PublicProjectSerializer(queryset, many=True).data)


@extend_schema_view(
    list=extend_schema(operation_id="list_skills", summary="List my skills", tags=["Portfolio - Skills"]),
    create=extend_schema(operation_id="create_skill", summary="Create skill", tags=["Portfolio - Skills"]),
    retrieve=extend_schema(operation_id="get_skill", summary="Get skill", tags=["Portfolio - Skills"]),
    update=extend_schema(operation_id="replace_skill", summary="Replace skill", tags=["Portfolio - Skills"]),
    partial_update=extend_schema(
        operation_id="update_skill", summary="Update skill", tags=["Portfolio - Skills"]
    ),
    destroy=extend_schema(operation_id="delete_skill", summary="Delete skill", tags=["Portfolio - Skills"]),
)
class SkillViewSet(viewsets.ModelViewSet):
    """The current user's skills. Level must be between 1 and 5."""

    serializer_class = SkillSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = SkillFilter

    def get_queryset(self):
        if not self.request.user.is_authenticated:
            return Skill.objects.none()
        return Skill.objects.filter(owner=self.request.user)

    @extend_schema(
        operation_id="list_skills_grouped",
        summary="List my skills by category",
        responses={200: OpenApiResponse(description="{category: [skill, ...]}")},
        tags=["Portfolio - Skills"],
    )
    @action(detail=False, methods=["get"])
    def grouped(self, request):
        groups = SkillService.grouped_by_category(request.user.id)
        return Response(
            {category: SkillSerializer(skills, many=True).data for category, skills in groups.items()}
        )


class UserProjectListView(generics.ListAPIView):
    """Another user's published projects."""

    serializer_class = PublicProjectSerializer
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_user_projects",
        summary="List a user's published projects",
        tags=["Auth - Users"],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        owner = get_object_or_404(User, pk=self.kwargs["user_id"], is_active=True)
        return Project.objects.filter(
            owner=owner,
            status=Project.Status.PUBLISHED,
        ).select_related("owner")


class UserSkillListView(generics.ListAPIView):
    serializer_class = SkillSerializer
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_user_skills",
        summary="List a user's skills",
        tags=["Auth - Users"],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        owner = get_object_or_404(User, pk=self.kwargs["user_id"], is_active=True)
        return Skill.objects.filter(owner=owner)
