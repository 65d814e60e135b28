from __future__ import annotations

from django.contrib.auth import get_user_model

from campus_events.core.throttling import client_ip

from .models import AuditLog

RECENT_DEFAULT_LIMIT = 5
RECENT_MAX_LIMIT = 50


def request_ip(request) -> str:
    if request is None:
        return ""
    return client_ip(request)[:64]


def clamp_recent_limit(raw) -> int:
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return RECENT_DEFAULT_LIMIT
    return max(1, min(limit, RECENT_MAX_LIMIT))


def log_action(  # noqa: PLR0913
    action: str,
    *,
    actor: object | None = None,
    message: str = "",
    model_name: str = "",
    record_id: int | None = None,
    before: dict | list | None = None,
    after: dict | list | None = None,
    ip_address: str = "",
) -> AuditLog:
    """Append one audit row.

    ``actor`` may be anything; only a saved user is stored, so anonymous
    callers and system jobs are recorded as ``system``.
    """

    user_model = get_user_model()
    is_user = isinstance(actor, user_model) and actor.pk is not None
    return AuditLog.objects.create(
        action=action,
        actor=actor if is_user else None,
        message=message[:2000],
        model_name=model_name,
        record_id=record_id,
        before=before,
        after=after,
        ip_address=ip_address,
    )
