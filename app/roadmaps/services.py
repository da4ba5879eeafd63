"""
Roadmap services.

Services:
    RoadmapService: Catalog of active roadmaps
    ProgressService: Enrollment, task status, certificates and submissions

Progress rows are only visible to their owner; another user's row or
enrollment is reported as not found.

Progress percentage is round-half-up of completed / total tasks, where
total counts the roadmap's current tasks (see core.helpers.percentage).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Count, Prefetch, Q
from django.utils import timezone

from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult
from media.services import get_storage_service
from media.validators import validate_upload
from portfolio.models import Project
from roadmaps.models import (
    RoadmapFinalProject,
    RoadmapTask,
    SkillRoadmap,
    TaskCertificate,
    TaskProject,
    UserRoadmap,
    UserTaskProgress,
)

if TYPE_CHECKING:
    from datetime import date

    from django.core.files.uploadedfile import UploadedFile
    from django.db.models import QuerySet

    from authentication.models import User

SUBMISSION_FIELDS = ("title", "description", "github_url", "demo_url", "technologies")


class RoadmapService(BaseService):
    @classmethod
    def active_roadmaps(cls) -> QuerySet[SkillRoadmap]:
        """Active roadmaps ordered by name, annotated with ``task_count``."""
        return (
            SkillRoadmap.objects.filter(is_active=True)
            .annotate(task_count=Count("tasks"))
            .order_by("name", "id")
        )

    @classmethod
    def get_roadmap(cls, roadmap_id: int) -> ServiceResult[SkillRoadmap]:
        """
        Active roadmap with its tasks prefetched in order.

        Error codes:
            ROADMAP_NOT_FOUND (404)
        """
        roadmap = (
            cls.active_roadmaps()
            .prefetch_related(Prefetch("tasks", queryset=RoadmapTask.objects.order_by("order_index")))
            .filter(pk=roadmap_id)
            .first()
        )
        if roadmap is None:
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)
        return ServiceResult.success(roadmap)


class ProgressService(BaseService):
    """A user's journey through roadmaps."""

    @classmethod
    def start_roadmap(cls, user: User, roadmap_id: int) -> ServiceResult[UserRoadmap]:
        """
        Enroll the user and create one pending progress row per task.

        Error codes:
            ROADMAP_NOT_FOUND (404)
            ROADMAP_ALREADY_STARTED (400)
        """
        roadmap = SkillRoadmap.objects.filter(pk=roadmap_id, is_active=True).first()
        if roadmap is None:
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)

        if UserRoadmap.objects.filter(user=user, roadmap=roadmap).exists():
            return ServiceResult.failure(
                "You have already started this roadmap",
                error_code="ROADMAP_ALREADY_STARTED",
            )

        try:
            with cls.atomic():
                user_roadmap = UserRoadmap.objects.create(user=user, roadmap=roadmap)
                UserTaskProgress.objects.bulk_create(
                    [
                        UserTaskProgress(user=user, task=task, user_roadmap=user_roadmap)
                        for task in roadmap.tasks.order_by("order_index")
                    ]
                )
        except IntegrityError:
            # Concurrent start for the same pair; the unique constraint wins.
            return ServiceResult.failure(
                "You have already started this roadmap",
                error_code="ROADMAP_ALREADY_STARTED",
            )

        cls.get_logger().info(f"User {user.id} started roadmap {roadmap.id}")
        return ServiceResult.success(cls.user_roadmaps(user).get(pk=user_roadmap.pk))

    @classmethod
    def user_roadmaps(cls, user: User) -> QuerySet[UserRoadmap]:
        """
        The user's enrollments, newest first.

        Annotated with ``total_tasks`` and ``completed_tasks`` for the
        progress percentage.
        """
        return (
            UserRoadmap.objects.filter(user=user)
            .select_related("roadmap")
            .annotate(
                total_tasks=Count("roadmap__tasks", distinct=True),
                completed_tasks=Count(
                    "task_progress",
                    filter=Q(task_progress__status=UserTaskProgress.Status.COMPLETED),
                    distinct=True,
                ),
            )
            .order_by("-created_at", "-id")
        )

    @classmethod
    def get_user_roadmap(cls, user: User, user_roadmap_id: int) -> ServiceResult[UserRoadmap]:
        """
        One enrollment with task progress, certificates, projects and final project.

        Error codes:
            USER_ROADMAP_NOT_FOUND (404)
        """
        progress = UserTaskProgress.objects.select_related("task").prefetch_related(
            "certificates", "projects"
        )
        user_roadmap = (
            cls.user_roadmaps(user)
            .select_related("final_project")
            .prefetch_related(Prefetch("task_progress", queryset=progress.order_by("task__order_index")))
            .filter(pk=user_roadmap_id)
            .first()
        )
        if user_roadmap is None:
            return ServiceResult.failure(
                "User roadmap not found",
                error_code="USER_ROADMAP_NOT_FOUND",
                status=404,
            )
        return ServiceResult.success(user_roadmap)

    @classmethod
    def update_task_status(cls, user: User, progress_id: int, status: str) -> ServiceResult[UserTaskProgress]:
        """
        Move a task to pending, in_progress or completed.

        in_progress stamps started_at; completed stamps completed_at (and
        started_at when the task was never started); pending clears both.

        Error codes:
            INVALID_STATUS (400)
            PROGRESS_NOT_FOUND (404)
        """
        if status not in UserTaskProgress.Status.values:
            return ServiceResult.failure(
                "Status must be one of: " + ", ".join(UserTaskProgress.Status.values),
                error_code="INVALID_STATUS",
            )

        result = cls._get_progress(user, progress_id)
        if not result.success:
            return result
        progress = result.data

        now = timezone.now()
        if status == UserTaskProgress.Status.IN_PROGRESS:
            progress.started_at = now
            progress.completed_at = None
        elif status == UserTaskProgress.Status.COMPLETED:
            progress.started_at = progress.started_at or now
            progress.completed_at = now
        else:
            progress.started_at = None
            progress.completed_at = None
        progress.status = status
        progress.save(update_fields=["status", "started_at", "completed_at", "updated_at"])

        cls.get_logger().info(f"Task progress {progress.id} is now {status}")
        return ServiceResult.success(progress)

    @classmethod
    def add_certificate(
        cls,
        user: User,
        progress_id: int,
        title: str | None,
        issuer: str = "",
        credential_url: str = "",
        issued_at: date | None = None,
        file: UploadedFile | None = None,
    ) -> ServiceResult[TaskCertificate]:
        """
        Attach a certificate to a task, optionally uploading its file.

        Error codes:
            VALIDATION_ERROR (400): title missing
            FILE_TYPE_NOT_ALLOWED / FILE_TOO_LARGE (400)
            PROGRESS_NOT_FOUND (404)
            STORAGE_UNAVAILABLE (503)
        """
        validation = cls.validate_required(title=title)
        if validation is not None:
            return validation

        result = cls._get_progress(user, progress_id)
        if not result.success:
            return result

        certificate = TaskCertificate(
            progress=result.data,
            title=title.strip(),
            issuer=issuer or "",
            credential_url=credential_url or "",
            issued_at=issued_at,
        )
        if file is not None:
            storage = get_storage_service()
            try:
                validate_upload(file)
                stored = storage.upload(file, user_id=user.id)
            except BaseApplicationError as e:
                return ServiceResult.from_exception(e)
            certificate.file_key = stored.key
            certificate.file_url = stored.url

        certificate.save()
        cls.get_logger().info(f"Certificate {certificate.id} added to task progress {progress_id}")
        return ServiceResult.success(certificate)

    @classmethod
    def add_task_project(cls, user: User, progress_id: int, **fields) -> ServiceResult[TaskProject]:
        """
        Record a new project for a task.

        Error codes:
            VALIDATION_ERROR (400): title missing
            PROGRESS_NOT_FOUND (404)
        """
        validation = cls.validate_required(title=fields.get("title"))
        if validation is not None:
            return validation

        result = cls._get_progress(user, progress_id)
        if not result.success:
            return result

        project = TaskProject.objects.create(progress=result.data, **_submission(fields))
        return ServiceResult.success(project)

    @classmethod
    def link_project(cls, user: User, progress_id: int, project_id: int) -> ServiceResult[TaskProject]:
        """
        Copy one of the user's portfolio projects onto a task.

        Error codes:
            PROGRESS_NOT_FOUND (404)
            PROJECT_NOT_FOUND (404): missing or owned by someone else
        """
        result = cls._get_progress(user, progress_id)
        if not result.success:
            return result

        source = Project.objects.filter(pk=project_id, owner=user).first()
        if source is None:
            return ServiceResult.failure("Project not found", error_code="PROJECT_NOT_FOUND", status=404)

        project = TaskProject.objects.create(
            progress=result.data,
            source_project=source,
            **{name: getattr(source, name) for name in SUBMISSION_FIELDS},
        )
        cls.get_logger().info(f"Linked project {source.id} to task progress {progress_id}")
        return ServiceResult.success(project)

    @classmethod
    def submit_final_project(
        cls,
        user: User,
        user_roadmap_id: int,
        **fields,
    ) -> ServiceResult[RoadmapFinalProject]:
        """
        Create or replace the final project and mark the roadmap completed.

        Error codes:
            VALIDATION_ERROR (400): title missing
            USER_ROADMAP_NOT_FOUND (404)
        """
        validation = cls.validate_required(title=fields.get("title"))
        if validation is not None:
            return validation

        user_roadmap = UserRoadmap.objects.filter(pk=user_roadmap_id, user=user).first()
        if user_roadmap is None:
            return ServiceResult.failure(
                "User roadmap not found",
                error_code="USER_ROADMAP_NOT_FOUND",
                status=404,
            )

        with cls.atomic():
            final_project, _ = RoadmapFinalProject.objects.update_or_create(
                user_roadmap=user_roadmap,
                defaults=_submission(fields),
            )
            user_roadmap.status = UserRoadmap.Status.COMPLETED
            user_roadmap.completed_at = timezone.now()
            user_roadmap.save(update_fields=["status", "completed_at", "updated_at"])

        cls.get_logger().info(f"User {user.id} completed roadmap {user_roadmap.roadmap_id}")
        return ServiceResult.success(final_project)

    @classmethod
    def _get_progress(cls, user: User, progress_id: int) -> ServiceResult[UserTaskProgress]:
        progress = UserTaskProgress.objects.filter(pk=progress_id, user=user).first()
        if progress is None:
            return ServiceResult.failure(
                "Task progress not found",
                error_code="PROGRESS_NOT_FOUND",
                status=404,
            )
        return ServiceResult.success(progress)


def _submission(fields: dict) -> dict:
    data = {name: fields[name] for name in SUBMISSION_FIELDS if fields.get(name) is not None}
    data["title"] = data["title"].strip()
    return data
