from __future__ import annotations

from typing import Any

from django.core.cache import cache
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

_PROBE_KEY = "health:probe"


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_cache() -> dict[str, Any]:
    """Round-trip a key through the configured cache (Redis in production)."""
    try:
        cache.set(_PROBE_KEY, "1", timeout=5)
        if cache.get(_PROBE_KEY) != "1":
            return {"ok": False, "error": "cache read-back mismatch"}
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


@transaction.non_atomic_requests
def health(request):
    db = check_db()
    cache_info = check_cache()
    components = {"db": db, "cache": cache_info}

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
