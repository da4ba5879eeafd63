"""
Project-wide pytest configuration.

This module configures Django settings for the test run and provides
fixtures shared by every app. App-specific fixtures are defined in each
app's tests/conftest.py.
"""

import pytest


def pytest_configure():
    """Configure Django settings before tests run."""
    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # No Redis during tests
    settings.CACHES = {
        "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
    }
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

    # The DEBUG env default in the root conftest arrives after settings load
    settings.SECURE_SSL_REDIRECT = False
    settings.CHAT_PRESENCE_MIRROR_ENABLED = False

    # Run Celery tasks inline
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py, test_consumers.py → e2e (full workflows)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_serializers.py, test_presence.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py", "test_consumers.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_permissions.py",
        "test_middleware.py",
        "test_commands.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_validators.py",
        "test_managers.py",
        "test_adapters.py",
        "test_presence.py",
        "test_predicates.py",
        "test_helpers.py",
        "test_exceptions.py",
        "test_storage.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def presence_registry():
    """
    Give every test a fresh, empty presence registry.

    Returns the registry so chat tests can seed or inspect it.
    """
    from django.apps import apps

    from chat.presence import PresenceRegistry

    config = apps.get_app_config("chat")
    previous = config.presence
    config.presence = PresenceRegistry()
    yield config.presence
    config.presence = previous


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


def _patch_postgresql_flush_for_cascade():
    """
    Patch PostgreSQL flush to always use CASCADE.

    TransactionTestCase (used by channels consumer tests) resets the
    database with TRUNCATE, which fails on FK-referenced tables without
    CASCADE.
    """
    from django.db.backends.postgresql import operations

    original_sql_flush = operations.DatabaseOperations.sql_flush

    def sql_flush_with_cascade(
        self, style, tables, *, reset_sequences=False, allow_cascade=False
    ):
        return original_sql_flush(
            self, style, tables, reset_sequences=reset_sequences, allow_cascade=True
        )

    operations.DatabaseOperations.sql_flush = sql_flush_with_cascade


# Apply the patch when conftest is loaded
_patch_postgresql_flush_for_cascade()
