"""Plain builders for the records most tests need."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from itertools import count
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import F
from django.utils import timezone

from campus_events.events.models import Event
from campus_events.registrations.models import Registration

User = get_user_model()

PASSWORD = "secret123"  # noqa: S105
_seq = count(1)


def create_student(**extra: Any):
    n = next(_seq)
    fields = {
        "name": f"Student {n}",
        "email": f"student{n}@college.edu",
        "password": PASSWORD,
        "role": User.Role.STUDENT,
        "student_id": f"STU{n:04d}",
        "department": "Computer Science",
        "year": 2,
    }
    fields.update(extra)
    return User.objects.create_user(**fields)


def create_admin(**extra: Any):
    n = next(_seq)
    fields = {
        "name": f"Admin {n}",
        "email": f"admin{n}@college.edu",
        "password": PASSWORD,
        "role": User.Role.ADMIN,
        "department": "Administration",
    }
    fields.update(extra)
    return User.objects.create_user(**fields)


def event_payload(**overrides: Any) -> dict[str, Any]:
    """Request body for ``POST /api/events`` starting ``days`` from now."""

    start = timezone.now() + timedelta(days=overrides.pop("days", 7))
    payload = {
        "title": "Tech Talk",
        "description": "An evening of short technical talks.",
        "category": Event.Category.TECHNICAL,
        "venue_name": "Main Auditorium",
        "venue_capacity": 200,
        "start_at": start.isoformat(),
        "end_at": (start + timedelta(hours=3)).isoformat(),
        "registration_deadline": (start - timedelta(days=1)).isoformat(),
    }
    payload.update(overrides)
    return payload


def create_event(organizer=None, *, days: float = 7, **extra: Any) -> Event:
    organizer = organizer or create_admin()
    start = timezone.now() + timedelta(days=days)
    fields = {
        "title": "Tech Talk",
        "description": "An evening of short technical talks.",
        "category": Event.Category.TECHNICAL,
        "organizer": organizer,
        "organizer_name": organizer.name,
        "organizer_email": organizer.email,
        "venue_name": "Main Auditorium",
        "venue_capacity": 200,
        "start_at": start,
        "end_at": start + timedelta(hours=3),
        "registration_deadline": start - timedelta(hours=1),
        "fee": Decimal(0),
    }
    fields.update(extra)
    return Event.objects.create(**fields)


def create_registration(user, event: Event, **extra: Any) -> Registration:
    """Insert a row directly, keeping the event counter in step."""

    registration = Registration.objects.create(user=user, event=event, **extra)
    if registration.is_counted:
        Event.objects.filter(pk=event.pk).update(
            current_participants=F("current_participants") + 1,
        )
        event.refresh_from_db()
    user.registered_events.add(event)
    return registration
