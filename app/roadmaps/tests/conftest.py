"""
Fixtures for roadmap tests.
"""

from unittest.mock import MagicMock, patch

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from media.services import StoredFile
from roadmaps.services import ProgressService
from roadmaps.tests.factories import RoadmapTaskFactory, SkillRoadmapFactory


@pytest.fixture
def user(db):
    return UserFactory(first_name="Ada", last_name="Lovelace")


@pytest.fixture
def other_user(db):
    return UserFactory(first_name="Grace", last_name="Hopper")


@pytest.fixture
def roadmap(db):
    """Frontend roadmap with three ordered tasks."""
    roadmap = SkillRoadmapFactory(name="Frontend Web Development")
    for index, title in enumerate(["HTML", "CSS", "JavaScript"], start=1):
        RoadmapTaskFactory(
            roadmap=roadmap,
            title=title,
            order_index=index,
            prerequisites=[index - 1] if index > 1 else [],
        )
    return roadmap


@pytest.fixture
def started(user, roadmap):
    """The user's enrollment in ``roadmap``."""
    return ProgressService.start_roadmap(user, roadmap.id).data


@pytest.fixture
def authenticated_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


@pytest.fixture
def mock_storage():
    storage = MagicMock()
    storage.upload.side_effect = lambda file, user_id=None, key=None: StoredFile(
        key=f"users/{user_id}/1700000000000-abcd1234-{file.name}",
        url=f"http://localhost:9000/uploads/users/{user_id}/1700000000000-abcd1234-{file.name}",
        original_name=file.name,
        size=file.size,
        content_type=file.content_type,
    )
    with patch("roadmaps.services.get_storage_service", return_value=storage):
        yield storage
