"""
Root pytest configuration for the Django project.

Sets environment defaults before Django settings are imported so the test
run never needs Redis, Postgres or object storage. App-level configuration
lives in app/conftest.py; app-specific fixtures in each app's
tests/conftest.py.
"""

import os

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("CHAT_PRESENCE_MIRROR_ENABLED", "False")
