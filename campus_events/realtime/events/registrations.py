from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from campus_events.registrations.models import Registration
from campus_events.realtime.socketio import ROOM_ADMIN
from campus_events.realtime.socketio import emit_event_to_room

logger = logging.getLogger(__name__)


def build_registration_payload(registration: Registration) -> dict[str, Any]:
    user = registration.user
    event = registration.event
    return {
        "id": registration.pk,
        "code": registration.code,
        "status": registration.status,
        "event": {"id": event.pk, "title": event.title},
        "user": {"id": user.pk, "name": user.name, "email": user.email}
        if user
        else None,
        "created_at": registration.created_at.isoformat()
        if registration.created_at
        else None,
    }


def publish_registration_created(registration: Registration) -> None:
    """Alert admins that someone signed up for an event."""

    user = registration.user
    who = user.name if user else "Someone"
    payload = {
        "registration": build_registration_payload(registration),
        "message": f'{who} registered for "{registration.event.title}"',
    }
    try:
        emit_event_to_room(ROOM_ADMIN, "new-registration", payload)
    except Exception:
        logger.exception("Realtime push of new-registration failed")
