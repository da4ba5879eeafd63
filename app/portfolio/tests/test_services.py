"""
Tests for portfolio services.
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from portfolio.models import Project
from portfolio.services import ProjectService, SkillService
from portfolio.tests.factories import ProjectFactory, SkillFactory


@pytest.mark.django_db
class TestProjectImage:
    def test_set_image_stores_under_owner_prefix(self, user, mock_storage):
        """
        The cover image key lives under the owner's prefix.

        Why it matters: Ownership of stored files is checked by key prefix.
        """
        project = ProjectFactory(owner=user)
        image = SimpleUploadedFile("cover.png", b"png", content_type="image/png")

        result = ProjectService.set_image(project, image)

        assert result.success
        project.refresh_from_db()
        assert project.image_key == f"users/{user.id}/1700000000000-abcd1234-project-{project.id}-cover.png"
        assert project.image_url.endswith(project.image_key)

    def test_replacing_image_deletes_old_key(self, user, mock_storage):
        """
        A new cover deletes the previous object best-effort.

        Why it matters: Replaced images must not accumulate in the bucket.
        """
        project = ProjectFactory(owner=user, image_key="users/1/old.png", image_url="http://x/old.png")

        ProjectService.set_image(
            project, SimpleUploadedFile("new.png", b"png", content_type="image/png")
        )

        mock_storage.delete_best_effort.assert_called_once_with("users/1/old.png")

    def test_non_image_is_rejected(self, user, mock_storage):
        """
        Non-image uploads fail with NOT_AN_IMAGE.

        Why it matters: Covers are rendered as images.
        """
        project = ProjectFactory(owner=user)

        result = ProjectService.set_image(
            project, SimpleUploadedFile("notes.txt", b"hi", content_type="text/plain")
        )

        assert result.error_code == "NOT_AN_IMAGE"
        mock_storage.upload.assert_not_called()

    def test_delete_project_removes_image(self, user, mock_storage):
        """
        Deleting a project also deletes its cover image.

        Why it matters: Orphaned objects cost storage.
        """
        project = ProjectFactory(owner=user, image_key="users/1/cover.png")

        ProjectService.delete_project(project)

        assert not Project.objects.filter(pk=project.pk).exists()
        mock_storage.delete_best_effort.assert_called_once_with("users/1/cover.png")


@pytest.mark.django_db
class TestSkillGrouping:
    def test_groups_by_category(self, user, other_user):
        """
        Skills are keyed by category and only include the owner's.

        Why it matters: The skills page renders one section per category.
        """
        SkillFactory(owner=user, category="frontend", name="React")
        SkillFactory(owner=user, category="backend", name="Django")
        SkillFactory(owner=user, category="backend", name="Postgres")
        SkillFactory(owner=other_user, category="backend", name="Rails")

        groups = SkillService.grouped_by_category(user.id)

        assert set(groups) == {"frontend", "backend"}
        assert sorted(s.name for s in groups["backend"]) == ["Django", "Postgres"]
