from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from campus_events.events.models import Event
from campus_events.realtime.socketio import emit_event_to_all

logger = logging.getLogger(__name__)


def build_event_payload(event: Event) -> dict[str, Any]:
    return {
        "id": event.pk,
        "title": event.title,
        "slug": event.slug,
        "category": event.category,
        "status": event.status,
        "start_at": event.start_at.isoformat() if event.start_at else None,
        "venue_name": event.venue_name,
        "max_participants": event.max_participants,
        "current_participants": event.current_participants,
        "registration_status": event.registration_status,
    }


def _broadcast(name: str, payload: dict[str, Any]) -> None:
    try:
        emit_event_to_all(name, payload)
    except Exception:
        logger.exception("Realtime broadcast of %s failed", name)


def publish_event_created(event: Event) -> None:
    """Tell every connected client a new event is out."""

    _broadcast(
        "new-event",
        {
            "event": build_event_payload(event),
            "message": f'New event "{event.title}" has been published!',
        },
    )


def publish_event_updated(event: Event) -> None:
    _broadcast(
        "event-updated",
        {
            "event": build_event_payload(event),
            "message": f'Event "{event.title}" has been updated!',
        },
    )
