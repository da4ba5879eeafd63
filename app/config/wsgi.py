"""
WSGI entry point.

Serves the HTTP API only; WebSocket chat needs the ASGI application in
config.asgi (run under Uvicorn).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
