from __future__ import annotations

import logging
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse

from eventhub.realtime.hub import get_notification_hub

logger = logging.getLogger(__name__)


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        logger.warning("Health check: database unavailable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_redis() -> dict[str, Any]:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except redis.RedisError as exc:
        logger.warning("Health check: redis unavailable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def health(request):
    components = {"db": check_db(), "redis": check_redis()}
    healthy = [info.get("ok", False) for info in components.values()]

    if all(healthy):
        status, http_status = "ok", 200
    elif any(healthy):
        status, http_status = "degraded", 503
    else:
        status, http_status = "down", 503

    return JsonResponse(
        {
            "status": status,
            "components": components,
            # Rooms with at least one subscriber in this process.
            "realtime": {"rooms": get_notification_hub().room_count()},
        },
        status=http_status,
    )
