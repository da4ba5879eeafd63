"""
Admin console services.

Services:
    UserAdminService: List, inspect, re-role, (de)activate users
    RoadmapAdminService: Roadmap and task authoring
    SkillAdminService: Skills of every user
    StatsService: Dashboard counters

List filters are composed from core.predicates, so any combination of
search and role/category is one query path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Count, Max

from authentication.models import User
from core.helpers import calculate_pagination
from core.predicates import combine, field_equals, text_search
from core.services import BaseService, ServiceResult
from portfolio.models import Project, Skill
from roadmaps.models import RoadmapTask, SkillRoadmap

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet


def _page(queryset: QuerySet, page: int, limit: int) -> tuple[list, dict[str, int]]:
    total = queryset.count()
    offset = (page - 1) * limit
    meta = calculate_pagination(total, page, limit)
    return list(queryset[offset : offset + limit]), {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": meta["total_pages"],
    }


class UserAdminService(BaseService):
    SEARCH_FIELDS = ("first_name", "last_name", "username", "email")

    @classmethod
    def list_users(
        cls,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        role: str | None = None,
    ) -> dict[str, Any]:
        """
        Users newest first, filtered by free text and role.

        Returns:
            {"users": [User, ...], "pagination": {page, limit, total, pages}}
        """
        predicate = combine(
            text_search(search, cls.SEARCH_FIELDS, full_name=("first_name", "last_name")),
            field_equals("role", role),
        )
        queryset = predicate.apply(User.objects.all()).order_by("-date_joined", "-id")
        users, pagination = _page(queryset, page, limit)
        return {"users": users, "pagination": pagination}

    @classmethod
    def get_user(cls, user_id: int) -> ServiceResult[User]:
        """
        One user, annotated with ``projects_count`` and ``skills_count``.

        Error codes:
            USER_NOT_FOUND (404)
        """
        user = (
            User.objects.annotate(
                projects_count=Count("projects", distinct=True),
                skills_count=Count("skills", distinct=True),
            )
            .filter(pk=user_id)
            .first()
        )
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND", status=404)
        return ServiceResult.success(user)

    @classmethod
    def set_role(cls, actor: User, user_id: int, role: str | None) -> ServiceResult[User]:
        """
        Error codes:
            INVALID_ROLE (400)
            USER_NOT_FOUND (404)
        """
        if role not in User.Role.values:
            return ServiceResult.failure(
                "Role must be one of: " + ", ".join(User.Role.values),
                error_code="INVALID_ROLE",
            )
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND", status=404)

        user.role = role
        user.save(update_fields=["role", "updated_at"])
        cls.get_logger().info(f"Admin {actor.id} set role of user {user.id} to {role}")
        return ServiceResult.success(user)

    @classmethod
    def set_active(cls, actor: User, user_id: int, is_active: bool) -> ServiceResult[User]:
        """
        Activate or deactivate an account.

        Error codes:
            USER_NOT_FOUND (404)
        """
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND", status=404)

        user.is_active = is_active
        user.save(update_fields=["is_active", "updated_at"])
        state = "activated" if is_active else "deactivated"
        cls.get_logger().info(f"Admin {actor.id} {state} user {user.id}")
        return ServiceResult.success(user)

    @classmethod
    def deactivate(cls, actor: User, user_id: int) -> ServiceResult[User]:
        """
        "Delete" a user by deactivating the account; rows are kept.

        Error codes:
            CANNOT_DELETE_SELF (400)
            USER_NOT_FOUND (404)
        """
        if actor.id == user_id:
            return ServiceResult.failure(
                "Cannot delete your own account",
                error_code="CANNOT_DELETE_SELF",
            )
        return cls.set_active(actor, user_id, False)


class RoadmapAdminService(BaseService):
    """Authoring of roadmap templates."""

    ROADMAP_FIELDS = (
        "name",
        "description",
        "category",
        "icon",
        "color",
        "estimated_duration",
        "difficulty",
        "is_active",
    )
    TASK_FIELDS = (
        "title",
        "description",
        "order_index",
        "estimated_hours",
        "resources",
        "prerequisites",
    )

    @classmethod
    def list_roadmaps(cls, search: str | None = None) -> QuerySet[SkillRoadmap]:
        """Every roadmap, active or not, newest first, with ``task_count``."""
        predicate = text_search(search, ["name"])
        return predicate.apply(SkillRoadmap.objects.annotate(task_count=Count("tasks"))).order_by(
            "-created_at", "-id"
        )

    @classmethod
    def create_roadmap(cls, **fields) -> ServiceResult[SkillRoadmap]:
        """
        Create a roadmap; omitted fields take the model defaults.

        Error codes:
            VALIDATION_ERROR (400): name, description or category missing
        """
        validation = cls.validate_required(
            name=fields.get("name"),
            description=fields.get("description"),
            category=fields.get("category"),
        )
        if validation is not None:
            return validation

        roadmap = SkillRoadmap.objects.create(**_pick(fields, cls.ROADMAP_FIELDS))
        cls.get_logger().info(f"Created roadmap {roadmap.id} ({roadmap.name})")
        return ServiceResult.success(roadmap)

    @classmethod
    def update_roadmap(cls, roadmap_id: int, **fields) -> ServiceResult[SkillRoadmap]:
        """
        Error codes:
            ROADMAP_NOT_FOUND (404)
        """
        roadmap = SkillRoadmap.objects.filter(pk=roadmap_id).first()
        if roadmap is None:
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)

        changes = _pick(fields, cls.ROADMAP_FIELDS)
        for name, value in changes.items():
            setattr(roadmap, name, value)
        roadmap.save(update_fields=[*changes, "updated_at"])
        return ServiceResult.success(roadmap)

    @classmethod
    def delete_roadmap(cls, roadmap_id: int) -> ServiceResult[None]:
        """
        Delete a roadmap that has no tasks.

        Error codes:
            ROADMAP_NOT_FOUND (404)
            ROADMAP_HAS_TASKS (400)
        """
        roadmap = SkillRoadmap.objects.filter(pk=roadmap_id).first()
        if roadmap is None:
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)
        if roadmap.tasks.exists():
            return ServiceResult.failure(
                "Cannot delete roadmap with existing tasks",
                error_code="ROADMAP_HAS_TASKS",
            )

        roadmap.delete()
        cls.get_logger().info(f"Deleted roadmap {roadmap_id}")
        return ServiceResult.success(None)

    @classmethod
    def list_tasks(cls, roadmap_id: int) -> ServiceResult[QuerySet[RoadmapTask]]:
        if not SkillRoadmap.objects.filter(pk=roadmap_id).exists():
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)
        return ServiceResult.success(RoadmapTask.objects.filter(roadmap_id=roadmap_id).order_by("order_index"))

    @classmethod
    def create_task(cls, roadmap_id: int, **fields) -> ServiceResult[RoadmapTask]:
        """
        Add a task; without order_index it goes after the last task.

        Error codes:
            VALIDATION_ERROR (400): title missing
            ROADMAP_NOT_FOUND (404)
            ORDER_INDEX_TAKEN (409)
        """
        validation = cls.validate_required(title=fields.get("title"))
        if validation is not None:
            return validation

        roadmap = SkillRoadmap.objects.filter(pk=roadmap_id).first()
        if roadmap is None:
            return ServiceResult.failure("Roadmap not found", error_code="ROADMAP_NOT_FOUND", status=404)

        data = _pick(fields, cls.TASK_FIELDS)
        if data.get("order_index") is None:
            last = roadmap.tasks.aggregate(last=Max("order_index"))["last"]
            data["order_index"] = 1 if last is None else last + 1

        try:
            with cls.atomic():
                task = RoadmapTask.objects.create(roadmap=roadmap, **data)
        except IntegrityError:
            return _order_taken(data["order_index"])
        return ServiceResult.success(task)

    @classmethod
    def update_task(cls, task_id: int, **fields) -> ServiceResult[RoadmapTask]:
        """
        Error codes:
            TASK_NOT_FOUND (404)
            ORDER_INDEX_TAKEN (409)
        """
        task = RoadmapTask.objects.filter(pk=task_id).first()
        if task is None:
            return ServiceResult.failure("Task not found", error_code="TASK_NOT_FOUND", status=404)

        changes = _pick(fields, cls.TASK_FIELDS)
        for name, value in changes.items():
            setattr(task, name, value)
        try:
            with cls.atomic():
                task.save(update_fields=[*changes, "updated_at"])
        except IntegrityError:
            return _order_taken(task.order_index)
        return ServiceResult.success(task)

    @classmethod
    def delete_task(cls, task_id: int) -> ServiceResult[None]:
        """
        Delete a task together with users' progress rows for it.

        Error codes:
            TASK_NOT_FOUND (404)
        """
        deleted, _ = RoadmapTask.objects.filter(pk=task_id).delete()
        if not deleted:
            return ServiceResult.failure("Task not found", error_code="TASK_NOT_FOUND", status=404)
        cls.get_logger().info(f"Deleted roadmap task {task_id}")
        return ServiceResult.success(None)


class SkillAdminService(BaseService):
    @classmethod
    def list_skills(
        cls,
        search: str | None = None,
        category: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> list[Skill]:
        """Skills of all users, newest first, with the owner loaded."""
        predicate = combine(
            text_search(search, ["name"]),
            field_equals("category", category),
        )
        queryset = predicate.apply(Skill.objects.select_related("owner")).order_by("-created_at", "-id")
        skills, _ = _page(queryset, page, limit)
        return skills


class StatsService(BaseService):
    @classmethod
    def dashboard(cls) -> dict[str, dict[str, int]]:
        """
        Returns:
            {"users": {total, active, admins},
             "roadmaps": {total, active},
             "content": {skills, projects}}
        """
        users = User.objects.all()
        roadmaps = SkillRoadmap.objects.all()
        return {
            "users": {
                "total": users.count(),
                "active": users.filter(is_active=True).count(),
                "admins": users.filter(role=User.Role.ADMIN).count(),
            },
            "roadmaps": {
                "total": roadmaps.count(),
                "active": roadmaps.filter(is_active=True).count(),
            },
            "content": {
                "skills": Skill.objects.count(),
                "projects": Project.objects.count(),
            },
        }


def _pick(fields: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    return {name: fields[name] for name in allowed if name in fields}


def _order_taken(order_index: int) -> ServiceResult:
    return ServiceResult.failure(
        f"Order index {order_index} is already used in this roadmap",
        error_code="ORDER_INDEX_TAKEN",
        status=409,
    )
