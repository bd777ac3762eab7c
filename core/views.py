"""Core utility views (unauthenticated).

- `health`: readiness endpoint that checks DB connectivity and returns a minimal
  JSON payload. Intended for load balancers/k8s probes.
"""

import logging

from django.http import JsonResponse
from django.utils.timezone import now
from django.db import connection

logger = logging.getLogger(__name__)


def health(request):
    """
    Lightweight health endpoint (no auth).

    Returns:
        200 JSON when DB is reachable; 503 JSON when a DB error is raised.
    """
    status = 200
    payload = {
        "app": "profile-records",
        "time": now().isoformat(),
        "db": "ok",
    }
    try:
        connection.ensure_connection()
    except Exception as exc:
        logger.warning("health check: database unreachable: %s", exc)
        payload["db"] = "down"
        payload["error"] = str(exc)
        status = 503
    return JsonResponse(payload, status=status)
