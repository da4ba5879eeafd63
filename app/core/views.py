"""
Infrastructure endpoints that sit outside the API namespace.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check for Docker, load balancers and uptime probes.

    The database is required; the Redis cache is reported but a cache
    outage only degrades the response, it does not fail it.

    Returns:
        200 {"status": "healthy", "database": "connected", "cache": ...}
        503 when the database cannot be reached
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"

    # IGNORE_EXCEPTIONS on the Redis cache turns outages into misses
    cache.set("health_check", "ok", timeout=1)
    health_status["cache"] = (
        "connected" if cache.get("health_check") == "ok" else "disconnected"
    )

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JsonResponse(health_status, status=status_code)
