"""
Tests for the ensure_bucket management command.
"""

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import CommandError, call_command

from core.exceptions import ExternalServiceError


class TestEnsureBucketCommand:
    def _run(self, storage):
        out = StringIO()
        with patch("media.management.commands.ensure_bucket.get_storage_service", return_value=storage):
            call_command("ensure_bucket", stdout=out)
        return out.getvalue()

    def test_reports_created_bucket(self):
        """
        Why it matters: Operators see whether bootstrap did anything.
        """
        storage = MagicMock(bucket_name="uploads")
        storage.ensure_bucket.return_value = True

        assert "Created bucket uploads" in self._run(storage)

    def test_reports_existing_bucket(self):
        """
        Why it matters: Re-running on deploy is expected and must succeed.
        """
        storage = MagicMock(bucket_name="uploads")
        storage.ensure_bucket.return_value = False

        assert "already exists" in self._run(storage)

    def test_storage_down_fails_command(self):
        """
        Why it matters: A deploy step must fail loudly when storage is unreachable.
        """
        storage = MagicMock(bucket_name="uploads")
        storage.ensure_bucket.side_effect = ExternalServiceError("down", error_code="STORAGE_UNAVAILABLE")

        with pytest.raises(CommandError):
            self._run(storage)
