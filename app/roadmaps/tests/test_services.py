"""
Tests for roadmap services.
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from freezegun import freeze_time

from core.helpers import percentage
from portfolio.tests.factories import ProjectFactory
from roadmaps.models import RoadmapFinalProject, UserRoadmap, UserTaskProgress
from roadmaps.services import ProgressService, RoadmapService
from roadmaps.tests.factories import RoadmapTaskFactory, SkillRoadmapFactory


def _complete(user, user_roadmap, count):
    rows = user_roadmap.task_progress.order_by("task__order_index")[:count]
    for row in rows:
        ProgressService.update_task_status(user, row.id, UserTaskProgress.Status.COMPLETED)


@pytest.mark.django_db
class TestRoadmapCatalog:
    def test_active_roadmaps_by_name_with_task_count(self, roadmap):
        """
        Only active roadmaps are listed, alphabetically, with task counts.

        Why it matters: Retired roadmaps must not be offered to users.
        """
        SkillRoadmapFactory(name="Backend")
        SkillRoadmapFactory(name="Archived", is_active=False)

        roadmaps = list(RoadmapService.active_roadmaps())

        assert [r.name for r in roadmaps] == ["Backend", "Frontend Web Development"]
        assert [r.task_count for r in roadmaps] == [0, 3]

    def test_get_roadmap_orders_tasks(self, roadmap):
        """
        Roadmap detail lists tasks by order_index.

        Why it matters: Users follow the tasks in authored order.
        """
        result = RoadmapService.get_roadmap(roadmap.id)

        assert result.success
        assert [t.title for t in result.data.tasks.all()] == ["HTML", "CSS", "JavaScript"]

    def test_get_inactive_roadmap_is_not_found(self):
        """
        Inactive roadmaps are hidden from users.

        Why it matters: Detail and list must agree on what exists.
        """
        roadmap = SkillRoadmapFactory(is_active=False)

        result = RoadmapService.get_roadmap(roadmap.id)

        assert result.error_code == "ROADMAP_NOT_FOUND"
        assert result.status_code == 404


@pytest.mark.django_db
class TestStartRoadmap:
    def test_creates_one_pending_row_per_task(self, user, roadmap):
        """
        Starting a roadmap with N tasks creates N pending progress rows.

        Why it matters: Progress is tracked against a snapshot of the tasks.
        """
        result = ProgressService.start_roadmap(user, roadmap.id)

        assert result.success
        rows = UserTaskProgress.objects.filter(user_roadmap=result.data)
        assert rows.count() == 3
        assert set(rows.values_list("status", flat=True)) == {UserTaskProgress.Status.PENDING}
        assert result.data.status == UserRoadmap.Status.IN_PROGRESS
        assert result.data.total_tasks == 3
        assert result.data.completed_tasks == 0

    def test_roadmap_without_tasks(self, user):
        """
        A roadmap with no tasks can be started and has no rows.

        Why it matters: Zero tasks must not break the progress math.
        """
        empty = SkillRoadmapFactory()

        result = ProgressService.start_roadmap(user, empty.id)

        assert result.success
        assert result.data.task_progress.count() == 0

    def test_starting_twice_fails(self, user, roadmap, started):
        """
        A second start returns ROADMAP_ALREADY_STARTED (400).

        Why it matters: Restarting would duplicate every progress row.
        """
        result = ProgressService.start_roadmap(user, roadmap.id)

        assert result.error_code == "ROADMAP_ALREADY_STARTED"
        assert result.status_code == 400
        assert UserTaskProgress.objects.filter(user=user).count() == 3

    def test_unknown_roadmap(self, user):
        """
        Starting a missing roadmap returns 404.

        Why it matters: The client gets a clear error instead of a 500.
        """
        result = ProgressService.start_roadmap(user, 999999)

        assert result.error_code == "ROADMAP_NOT_FOUND"
        assert result.status_code == 404


@pytest.mark.django_db
class TestProgressPercentage:
    @pytest.mark.parametrize(
        ("completed", "expected"),
        [(0, 0), (1, 33), (2, 67), (3, 100)],
    )
    def test_percentage_rounds_half_up(self, user, started, completed, expected):
        """
        Progress is round(completed / total * 100).

        Why it matters: 2 of 3 tasks must read 67%, not 66%.
        """
        _complete(user, started, completed)

        summary = ProgressService.user_roadmaps(user).get(pk=started.pk)

        assert summary.completed_tasks == completed
        assert summary.total_tasks == 3
        assert percentage(summary.completed_tasks, summary.total_tasks) == expected

    def test_other_users_progress_is_separate(self, user, other_user, roadmap, started):
        """
        Completing tasks only counts for the user who did them.

        Why it matters: Progress is per user.
        """
        other = ProgressService.start_roadmap(other_user, roadmap.id).data
        _complete(user, started, 3)

        summary = ProgressService.user_roadmaps(other_user).get(pk=other.pk)
        assert summary.completed_tasks == 0


@pytest.mark.django_db
class TestUpdateTaskStatus:
    @freeze_time("2026-03-01 10:00:00")
    def test_in_progress_sets_started_at(self, user, started):
        """
        Moving to in_progress stamps started_at.

        Why it matters: The UI shows when work on a task began.
        """
        row = started.task_progress.first()

        result = ProgressService.update_task_status(user, row.id, "in_progress")

        assert result.data.status == UserTaskProgress.Status.IN_PROGRESS
        assert result.data.started_at.isoformat().startswith("2026-03-01T10:00:00")
        assert result.data.completed_at is None

    def test_completed_sets_completed_at(self, user, started):
        """
        Completing stamps completed_at and backfills started_at.

        Why it matters: A completed task always has both timestamps.
        """
        row = started.task_progress.first()

        result = ProgressService.update_task_status(user, row.id, "completed")

        assert result.data.completed_at is not None
        assert result.data.started_at is not None

    def test_back_to_pending_clears_timestamps(self, user, started):
        """
        Resetting a task to pending clears both timestamps.

        Why it matters: A reset task must look untouched.
        """
        row = started.task_progress.first()
        ProgressService.update_task_status(user, row.id, "completed")

        result = ProgressService.update_task_status(user, row.id, "pending")

        assert result.data.started_at is None
        assert result.data.completed_at is None

    def test_invalid_status(self, user, started):
        """
        Unknown statuses are rejected with INVALID_STATUS.

        Why it matters: Status values drive progress counts.
        """
        row = started.task_progress.first()

        result = ProgressService.update_task_status(user, row.id, "done")

        assert result.error_code == "INVALID_STATUS"

    def test_other_users_row_is_not_found(self, other_user, started):
        """
        Another user's progress row is reported as not found.

        Why it matters: Users cannot edit each other's progress.
        """
        row = started.task_progress.first()

        result = ProgressService.update_task_status(other_user, row.id, "completed")

        assert result.error_code == "PROGRESS_NOT_FOUND"
        assert result.status_code == 404


@pytest.mark.django_db
class TestCertificates:
    def test_certificate_with_url_only(self, user, started):
        """
        A certificate can be recorded with just a credential URL.

        Why it matters: Many certificates live on the issuer's site.
        """
        row = started.task_progress.first()

        result = ProgressService.add_certificate(
            user,
            row.id,
            title="HTML Basics",
            issuer="freeCodeCamp",
            credential_url="https://example.com/cert/1",
        )

        assert result.success
        assert result.data.file_key is None
        assert result.data.issuer == "freeCodeCamp"

    def test_certificate_file_is_uploaded(self, user, started, mock_storage):
        """
        An attached file is stored under the user's prefix.

        Why it matters: Certificate files are private to their owner's keyspace.
        """
        row = started.task_progress.first()
        pdf = SimpleUploadedFile("cert.pdf", b"%PDF-1.4", content_type="application/pdf")

        result = ProgressService.add_certificate(user, row.id, title="CSS", file=pdf)

        assert result.success
        assert result.data.file_key.startswith(f"users/{user.id}/")
        assert result.data.file_url.endswith("cert.pdf")
        mock_storage.upload.assert_called_once()

    def test_disallowed_file_type(self, user, started, mock_storage):
        """
        Files outside the allowed types are rejected before upload.

        Why it matters: Only documents and images are accepted.
        """
        row = started.task_progress.first()
        exe = SimpleUploadedFile("cert.exe", b"MZ", content_type="application/x-msdownload")

        result = ProgressService.add_certificate(user, row.id, title="CSS", file=exe)

        assert result.error_code == "FILE_TYPE_NOT_ALLOWED"
        mock_storage.upload.assert_not_called()

    def test_title_is_required(self, user, started):
        """
        Certificates need a title.

        Why it matters: The title is what the progress page shows.
        """
        row = started.task_progress.first()

        result = ProgressService.add_certificate(user, row.id, title="  ")

        assert result.error_code == "VALIDATION_ERROR"
        assert "title" in result.errors


@pytest.mark.django_db
class TestTaskProjects:
    def test_add_task_project(self, user, started):
        """
        A new project is recorded against the task.

        Why it matters: Projects prove the task was practiced.
        """
        row = started.task_progress.first()

        result = ProgressService.add_task_project(
            user,
            row.id,
            title=" Landing page ",
            technologies=["html", "css"],
        )

        assert result.success
        assert result.data.title == "Landing page"
        assert result.data.technologies == ["html", "css"]
        assert result.data.source_project is None

    def test_link_copies_portfolio_project(self, user, started):
        """
        Linking copies the portfolio project's fields onto the task.

        Why it matters: Users reuse existing work without retyping it.
        """
        row = started.task_progress.first()
        project = ProjectFactory(
            owner=user,
            title="Todo app",
            github_url="https://github.com/ada/todo",
            technologies=["svelte"],
        )

        result = ProgressService.link_project(user, row.id, project.id)

        assert result.success
        assert result.data.title == "Todo app"
        assert result.data.github_url == "https://github.com/ada/todo"
        assert result.data.technologies == ["svelte"]
        assert result.data.source_project == project

    def test_link_someone_elses_project(self, user, other_user, started):
        """
        Linking another user's project returns PROJECT_NOT_FOUND (404).

        Why it matters: Users cannot claim other people's work.
        """
        row = started.task_progress.first()
        project = ProjectFactory(owner=other_user)

        result = ProgressService.link_project(user, row.id, project.id)

        assert result.error_code == "PROJECT_NOT_FOUND"
        assert result.status_code == 404


@pytest.mark.django_db
class TestFinalProject:
    def test_submitting_completes_roadmap(self, user, started):
        """
        The final project marks the enrollment completed.

        Why it matters: Completion is driven by the capstone submission.
        """
        result = ProgressService.submit_final_project(user, started.id, title="Portfolio site")

        assert result.success
        started.refresh_from_db()
        assert started.status == UserRoadmap.Status.COMPLETED
        assert started.completed_at is not None

    def test_resubmitting_replaces_final_project(self, user, started):
        """
        A second submission updates the existing final project.

        Why it matters: There is one final project per enrollment.
        """
        ProgressService.submit_final_project(user, started.id, title="First")
        ProgressService.submit_final_project(user, started.id, title="Second")

        assert RoadmapFinalProject.objects.filter(user_roadmap=started).count() == 1
        assert RoadmapFinalProject.objects.get(user_roadmap=started).title == "Second"

    def test_other_users_enrollment(self, other_user, started):
        """
        Submitting to someone else's enrollment is not found.

        Why it matters: Users cannot complete each other's roadmaps.
        """
        result = ProgressService.submit_final_project(other_user, started.id, title="Nope")

        assert result.error_code == "USER_ROADMAP_NOT_FOUND"


@pytest.mark.django_db
class TestUserRoadmapDetail:
    def test_detail_includes_progress_and_attachments(self, user, started):
        """
        The detail view carries task rows, their certificates and projects.

        Why it matters: The progress page renders from one request.
        """
        row = started.task_progress.order_by("task__order_index").first()
        ProgressService.add_certificate(user, row.id, title="HTML cert")
        ProgressService.add_task_project(user, row.id, title="Page")

        result = ProgressService.get_user_roadmap(user, started.id)

        assert result.success
        rows = list(result.data.task_progress.all())
        assert [r.task.title for r in rows] == ["HTML", "CSS", "JavaScript"]
        assert [c.title for c in rows[0].certificates.all()] == ["HTML cert"]
        assert [p.title for p in rows[0].projects.all()] == ["Page"]

    def test_tasks_added_later_count_towards_total(self, user, roadmap, started):
        """
        Total counts the roadmap's current tasks.

        Why it matters: New tasks lower the percentage until tracked.
        """
        RoadmapTaskFactory(roadmap=roadmap, order_index=4)

        summary = ProgressService.user_roadmaps(user).get(pk=started.pk)

        assert summary.total_tasks == 4
