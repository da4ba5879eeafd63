"""
Portfolio services.

Services:
    ProjectService: Cover image lifecycle and project removal
    SkillService: Category grouping

Plain CRUD runs through the ModelViewSets; only operations that touch
object storage or reshape data live here.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult
from media.services import get_storage_service
from media.validators import MAX_UPLOAD_SIZE_BYTES, validate_image
from portfolio.models import Project, Skill

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile


class ProjectService(BaseService):
    """Project operations that involve object storage."""

    @classmethod
    def set_image(cls, project: Project, file: UploadedFile | None) -> ServiceResult[Project]:
        """
        Upload a cover image, replacing the previous one.

        The old object is deleted best-effort after the new one is saved.

        Error codes:
            NO_FILE / NOT_AN_IMAGE / FILE_TOO_LARGE (400)
            STORAGE_UNAVAILABLE (503)
        """
        storage = get_storage_service()
        try:
            validate_image(file, max_size=MAX_UPLOAD_SIZE_BYTES)
            key = storage.generate_key(f"project-{project.id}-{file.name}", project.owner_id)
            stored = storage.upload(file, key=key)
        except BaseApplicationError as e:
            return ServiceResult.from_exception(e)

        old_key = project.image_key
        project.image_url = stored.url
        project.image_key = stored.key
        project.save(update_fields=["image_url", "image_key", "updated_at"])

        if old_key and old_key != stored.key:
            storage.delete_best_effort(old_key)

        cls.get_logger().info(f"Project {project.id} image set to {stored.key}")
        return ServiceResult.success(project)

    @classmethod
    def delete_project(cls, project: Project) -> None:
        """Delete a project and, best-effort, its cover image."""
        image_key = project.image_key
        project_id = project.id
        project.delete()
        if image_key:
            get_storage_service().delete_best_effort(image_key)
        cls.get_logger().info(f"Deleted project {project_id}")


class SkillService(BaseService):
    @classmethod
    def grouped_by_category(cls, owner_id: int) -> dict[str, list[Skill]]:
        """
        A user's skills keyed by category, newest first within each group.

        Returns:
            {"frontend": [Skill, ...], "tools": [...]}
        """
        groups: dict[str, list[Skill]] = defaultdict(list)
        for skill in Skill.objects.filter(owner_id=owner_id).order_by("-created_at", "-id"):
            groups[skill.category].append(skill)
        return dict(groups)
