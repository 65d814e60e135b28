"""Catalog operations: event lifecycle, listings, analytics, counter upkeep."""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count
from django.db.models import F
from django.db.models import OuterRef
from django.db.models import Subquery
from django.db.models import Sum
from django.db.models import Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from campus_events.core.exceptions import Conflict
from campus_events.realtime.events.catalog import publish_event_created
from campus_events.realtime.events.catalog import publish_event_updated
from campus_events.registrations.models import COUNTED_STATUSES
from campus_events.registrations.models import Registration

from .models import Event

logger = logging.getLogger(__name__)

UPCOMING_DEFAULT_LIMIT = 10
UPCOMING_MAX_LIMIT = 50
SEARCH_MIN_LENGTH = 2

SORTABLE_FIELDS = (
    "start_at",
    "end_at",
    "created_at",
    "title",
    "views",
    "current_participants",
)

# Never writable through create/update payloads.
READ_ONLY_FIELDS = frozenset(
    {
        "slug",
        "organizer",
        "organizer_name",
        "organizer_email",
        "organizer_department",
        "organizer_contact",
        "current_participants",
        "views",
        "interests",
        "shares",
        "created_at",
        "updated_at",
    },
)

_TIMEFRAME = re.compile(r"^(\d+)d?$")


def get_event(event_id, *, for_update: bool = False) -> Event:
    qs = Event.objects.select_related("organizer")
    if for_update:
        qs = Event.objects.select_for_update()
    try:
        return qs.get(pk=event_id)
    except (Event.DoesNotExist, ValueError, TypeError) as exc:
        msg = "Event not found"
        raise NotFound(msg) from exc


def can_manage(event: Event, caller) -> bool:
    if getattr(caller, "is_admin", False):
        return True
    return event.organizer_id is not None and event.organizer_id == caller.pk


def _ensure_can_manage(event: Event, caller, verb: str) -> None:
    if not can_manage(event, caller):
        msg = f"Access denied. You can only {verb} your own events."
        raise PermissionDenied(msg)


def _check_invariants(event: Event) -> None:
    try:
        event.clean()
    except DjangoValidationError as exc:
        raise ValidationError(exc.message_dict) from exc


def record_view(event: Event, caller=None) -> None:
    """Count a detail view unless the organizer is looking at their own event."""

    if caller is not None and caller.pk == event.organizer_id:
        return
    Event.objects.filter(pk=event.pk).update(views=F("views") + 1)
    event.views += 1


def create_event(data: dict[str, Any], organizer) -> Event:
    fields = {k: v for k, v in data.items() if k not in READ_ONLY_FIELDS}
    event = Event(
        **fields,
        organizer=organizer,
        organizer_name=organizer.name,
        organizer_email=organizer.email,
        organizer_department=organizer.department or "",
        organizer_contact=organizer.phone or "",
    )
    _check_invariants(event)
    with transaction.atomic():
        event.assign_slug()
        event.save()
        transaction.on_commit(lambda: publish_event_created(event))
    logger.info("Event created id=%s slug=%s", event.pk, event.slug)
    return event


def update_event(event_id, data: dict[str, Any], caller) -> Event:
    with transaction.atomic():
        event = get_event(event_id, for_update=True)
        _ensure_can_manage(event, caller, "update")
        for key, value in data.items():
            if key not in READ_ONLY_FIELDS:
                setattr(event, key, value)
        _check_invariants(event)
        event.save()
        transaction.on_commit(lambda: publish_event_updated(event))
    return event


def delete_event(event_id, caller) -> Event:
    with transaction.atomic():
        event = get_event(event_id, for_update=True)
        _ensure_can_manage(event, caller, "delete")
        if Registration.objects.filter(event=event).exists():
            msg = (
                "Cannot delete event with existing registrations. "
                "Cancel the event instead."
            )
            raise Conflict(msg)
        event.delete()
    return event


def _clamp_limit(limit, default: int, maximum: int) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return default
    return max(1, min(value, maximum))


def upcoming_events(limit=UPCOMING_DEFAULT_LIMIT) -> list[Event]:
    limit = _clamp_limit(limit, UPCOMING_DEFAULT_LIMIT, UPCOMING_MAX_LIMIT)
    qs = Event.objects.published().upcoming().select_related("organizer")
    return list(qs.order_by("start_at")[:limit])


def events_by_category(category: str, limit=UPCOMING_DEFAULT_LIMIT) -> list[Event]:
    if category not in Event.Category.values:
        msg = f"Unknown category '{category}'"
        raise ValidationError(msg)
    limit = _clamp_limit(limit, UPCOMING_DEFAULT_LIMIT, UPCOMING_MAX_LIMIT)
    qs = (
        Event.objects.published()
        .upcoming()
        .in_category(category)
        .select_related("organizer")
    )
    return list(qs.order_by("start_at")[:limit])


def search_events(q: str | None, category=None, date_from=None, date_to=None):
    """Queryset of published events matching ``q``; paginated by the caller."""

    q = (q or "").strip()
    if len(q) < SEARCH_MIN_LENGTH:
        msg = "Search query must be at least 2 characters long"
        raise ValidationError(msg)
    qs = Event.objects.published().search(q)
    if category:
        qs = qs.in_category(category)
    if date_from:
        qs = qs.filter(start_at__gte=date_from)
    if date_to:
        qs = qs.filter(start_at__lte=date_to)
    return qs.select_related("organizer").order_by("start_at")


def ordering_for(sort_by: str | None, sort_order: str | None) -> str:
    field = sort_by if sort_by in SORTABLE_FIELDS else "start_at"
    return f"-{field}" if sort_order == "desc" else field


def parse_timeframe(timeframe: str | None, default_days: int) -> int:
    if not timeframe:
        return default_days
    match = _TIMEFRAME.match(timeframe.strip())
    if not match or int(match.group(1)) < 1:
        msg = "timeframe must look like '30d'"
        raise ValidationError(msg)
    return int(match.group(1))


def event_analytics(days: int) -> dict[str, Any]:
    since = timezone.now() - timedelta(days=days)
    counts = dict(
        Event.objects.order_by()
        .values_list("status")
        .annotate(n=Count("id"))
        .values_list("status", "n"),
    )
    overview = {
        "total": sum(counts.values()),
        "published": counts.get(Event.Status.PUBLISHED, 0),
        "draft": counts.get(Event.Status.DRAFT, 0),
        "completed": counts.get(Event.Status.COMPLETED, 0),
        "cancelled": counts.get(Event.Status.CANCELLED, 0),
    }
    by_category = (
        Event.objects.filter(created_at__gte=since)
        .order_by()
        .values("category")
        .annotate(
            count=Count("id"),
            total_views=Coalesce(Sum("views"), Value(0)),
            total_registrations=Coalesce(Sum("current_participants"), Value(0)),
        )
        .order_by("-count", "category")
    )
    return {
        "overview": overview,
        "analytics": list(by_category),
        "timeframe": f"{days}d",
    }


def reconcile_participant_counts(event_ids=None) -> int:
    """Reset every stored counter to the number of counted registrations.

    Returns how many events were corrected.
    """

    counted = (
        Registration.objects.filter(event=OuterRef("pk"), status__in=COUNTED_STATUSES)
        .order_by()
        .values("event")
        .annotate(n=Count("pk"))
        .values("n")
    )
    qs = Event.objects.annotate(actual=Coalesce(Subquery(counted), Value(0)))
    if event_ids is not None:
        qs = qs.filter(pk__in=list(event_ids))
    drifted = list(
        qs.exclude(current_participants=F("actual")).values_list("pk", "actual"),
    )
    with transaction.atomic():
        for event_id, actual in drifted:
            Event.objects.filter(pk=event_id).update(current_participants=actual)
    for event_id, actual in drifted:
        logger.info("Corrected participant count event=%s -> %s", event_id, actual)
    return len(drifted)
