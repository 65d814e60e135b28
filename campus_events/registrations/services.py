"""Enrollment state machine and admin queries.

Every transition that moves a registration into or out of a counted status
adjusts ``Event.current_participants`` with an ``F()`` expression inside the
same transaction as the status write.
"""

from __future__ import annotations

import logging
from datetime import datetime
from datetime import timedelta
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db import transaction
from django.db.models import Count
from django.db.models import F
from django.db.models import Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from campus_events.audit.models import AuditLog
from campus_events.audit.utils import log_action
from campus_events.core.exceptions import AlreadyRegistered
from campus_events.core.exceptions import DeadlinePassed
from campus_events.core.exceptions import InvalidState
from campus_events.core.exceptions import RegistrationClosed
from campus_events.events import services as event_services
from campus_events.events.models import Event
from campus_events.realtime.events.registrations import publish_registration_created

from .models import COUNTED_STATUSES
from .models import Registration
from .validation import validate_feedback_responses
from .validation import validate_registration_answers

logger = logging.getLogger(__name__)

CLOSED_REASONS = {
    Event.RegistrationStatus.CLOSED: "Registration is closed: the event has already started",
    Event.RegistrationStatus.EXPIRED: "Registration is closed: the deadline has passed",
    Event.RegistrationStatus.FULL: "Registration is closed: the event is full",
}
RECENT_LIMIT = 10
DEFAULT_RANGE_DAYS = 30


def _adjust_counter(event_id: int, delta: int) -> None:
    Event.objects.filter(pk=event_id).update(
        current_participants=F("current_participants") + delta,
    )


def get_registration(registration_id, *, for_update: bool = False) -> Registration:
    qs = Registration.objects.all()
    if for_update:
        qs = qs.select_for_update()
    else:
        qs = qs.select_related("user", "event")
    try:
        return qs.get(pk=registration_id)
    except (Registration.DoesNotExist, ValueError, TypeError) as exc:
        msg = "Registration not found"
        raise NotFound(msg) from exc


def _ensure_owner(registration: Registration, caller) -> None:
    if registration.user_id is None or registration.user_id != caller.pk:
        msg = "Access denied"
        raise PermissionDenied(msg)


def register_for_event(
    user,
    event_id,
    answers: dict[str, Any] | None = None,
    *,
    metadata: dict[str, Any] | None = None,
) -> Registration:
    metadata = metadata or {}
    try:
        with transaction.atomic():
            event = event_services.get_event(event_id, for_update=True)
            if event.status != Event.Status.PUBLISHED:
                msg = "Event is not available for registration"
                raise InvalidState(msg)
            state = event.registration_status
            if state != Event.RegistrationStatus.OPEN:
                raise RegistrationClosed(CLOSED_REASONS[state])
            if Registration.objects.filter(user=user, event=event).exists():
                raise AlreadyRegistered
            cleaned = validate_registration_answers(event.registration_fields, answers)

            has_fee = event.fee > Decimal(0)
            registration = Registration.objects.create(
                user=user,
                event=event,
                answers=cleaned,
                status=Registration.Status.CONFIRMED,
                payment_status=(
                    Registration.PaymentStatus.PENDING
                    if has_fee
                    else Registration.PaymentStatus.NOT_REQUIRED
                ),
                payment_amount=event.fee if has_fee else None,
                source=metadata.get("source") or Registration.Source.WEB,
                ip_address=metadata.get("ip_address") or None,
                user_agent=(metadata.get("user_agent") or "")[:500],
                referrer=(metadata.get("referrer") or "")[:500],
            )
            user.registered_events.add(event)
            _adjust_counter(event.pk, +1)
            transaction.on_commit(lambda: publish_registration_created(registration))
    except IntegrityError as exc:
        raise AlreadyRegistered from exc

    logger.info(
        "Registration created code=%s user=%s event=%s",
        registration.code,
        user.pk,
        event.pk,
    )
    return registration


def cancel_registration(registration_id, caller, reason: str = "") -> Registration:
    cutoff_hours = settings.CANCELLATION_CUTOFF_HOURS
    with transaction.atomic():
        registration = get_registration(registration_id)
        # Lock the event before the registration, same order as register_for_event.
        event = event_services.get_event(registration.event_id, for_update=True)
        registration = get_registration(registration_id, for_update=True)

        _ensure_owner(registration, caller)
        if registration.status == Registration.Status.CANCELLED:
            msg = "Registration is already cancelled"
            raise InvalidState(msg)
        if registration.status == Registration.Status.ATTENDED:
            msg = "Cannot cancel registration after attending the event"
            raise InvalidState(msg)
        now = timezone.now()
        if event.start_at - now < timedelta(hours=cutoff_hours):
            msg = (
                f"Cannot cancel registration less than {cutoff_hours} hours "
                "before the event"
            )
            raise DeadlinePassed(msg)

        previous_status = registration.status
        was_counted = registration.is_counted
        registration.status = Registration.Status.CANCELLED
        registration.cancellation_reason = reason or ""
        registration.cancelled_at = now
        registration.save(
            update_fields=[
                "status",
                "cancellation_reason",
                "cancelled_at",
                "updated_at",
            ],
        )
        if was_counted:
            _adjust_counter(event.pk, -1)
        caller.registered_events.remove(event)
        log_action(
            AuditLog.Action.REGISTRATION_CANCELLED,
            actor=caller,
            message=f"code={registration.code} reason={reason or '-'}",
            model_name="registrations.Registration",
            record_id=registration.pk,
            before={"status": previous_status},
            after={"status": Registration.Status.CANCELLED},
        )

    logger.info("Registration cancelled code=%s", registration.code)
    registration.event = event
    return registration


def mark_attendance(
    registration_id,
    *,
    check_in: bool = True,
    notes: str = "",
) -> Registration:
    with transaction.atomic():
        registration = get_registration(registration_id, for_update=True)
        now = timezone.now()
        if check_in:
            registration.checked_in = True
            registration.check_in_time = now
            # confirmed -> attended keeps the seat, so the counter is untouched.
            if registration.status == Registration.Status.CONFIRMED:
                registration.status = Registration.Status.ATTENDED
        else:
            registration.checked_out = True
            registration.check_out_time = now
        notes = (notes or "").strip()
        if notes:
            existing = registration.attendance_notes
            registration.attendance_notes = f"{existing}\n{notes}" if existing else notes
        registration.save()
    return get_registration(registration.pk)


def submit_feedback(
    registration_id,
    caller,
    *,
    rating: int | None = None,
    comments: str = "",
    responses: dict[str, Any] | None = None,
) -> Registration:
    with transaction.atomic():
        registration = get_registration(registration_id, for_update=True)
        _ensure_owner(registration, caller)
        if registration.status != Registration.Status.ATTENDED:
            msg = "Feedback can only be submitted for attended events"
            raise InvalidState(msg)
        event = Event.objects.get(pk=registration.event_id)
        if not event.feedback_enabled:
            msg = "Feedback is not enabled for this event"
            raise InvalidState(msg)
        if rating is not None and not 1 <= rating <= 5:  # noqa: PLR2004
            msg = "Rating must be between 1 and 5"
            raise ValidationError(msg)
        cleaned = validate_feedback_responses(event.feedback_questions, responses)

        # Resubmission overwrites the previous feedback.
        registration.feedback_rating = rating
        registration.feedback_comments = comments or ""
        registration.feedback_responses = cleaned
        registration.feedback_submitted_at = timezone.now()
        registration.save()
    return get_registration(registration.pk)


def registration_detail(registration_id, caller) -> Registration:
    registration = get_registration(registration_id)
    if not getattr(caller, "is_admin", False):
        _ensure_owner(registration, caller)
    return registration


def _filter_status(qs, status: str | None):
    if not status:
        return qs
    if status not in Registration.Status.values:
        msg = f"Invalid status '{status}'"
        raise ValidationError(msg)
    return qs.filter(status=status)


def my_registrations(user, status: str | None = None):
    qs = Registration.objects.filter(user=user).select_related("event")
    return _filter_status(qs, status).order_by("-created_at", "-id")


def registration_stats(event_id=None) -> dict[str, Any]:
    qs = Registration.objects.all()
    if event_id is not None:
        qs = qs.filter(event_id=event_id)
    rows = list(
        qs.order_by()
        .values("status")
        .annotate(count=Count("id"), total_fee=Sum("payment_amount"))
        .order_by("status"),
    )
    status_counts = [
        {
            "status": row["status"],
            "count": row["count"],
            "total_fee": row["total_fee"] or Decimal(0),
        }
        for row in rows
    ]
    return {
        "status_counts": status_counts,
        "total_registrations": sum(row["count"] for row in status_counts),
        "total_revenue": sum(
            (row["total_fee"] for row in status_counts),
            Decimal(0),
        ),
    }


def event_registrations(event_id, status: str | None = None):
    """Return ``(event, queryset, stats)`` for the admin roster of an event."""

    event = event_services.get_event(event_id)
    qs = Registration.objects.filter(event=event).select_related("user")
    qs = _filter_status(qs, status).order_by("-created_at", "-id")
    return event, qs, registration_stats(event.pk)


def registrations_in_range(start: datetime, end: datetime, event_id=None):
    qs = Registration.objects.filter(created_at__gte=start, created_at__lte=end)
    if event_id is not None:
        qs = qs.filter(event_id=event_id)
    return qs.select_related("user", "event").order_by("-created_at", "-id")


def registration_analytics(
    start: datetime | None = None,
    end: datetime | None = None,
    event_id=None,
) -> dict[str, Any]:
    end = end or timezone.now()
    start = start or end - timedelta(days=DEFAULT_RANGE_DAYS)
    if start > end:
        msg = "start_date must be before end_date"
        raise ValidationError(msg)
    recent = list(registrations_in_range(start, end, event_id)[:RECENT_LIMIT])
    return {
        "overview": registration_stats(event_id),
        "recent_registrations": recent,
        "date_range": {"start": start, "end": end},
    }


def _sync_registered_events(pairs: list[tuple[int, int]], status: str) -> None:
    """Keep ``User.registered_events`` in step with overridden registrations."""

    through = get_user_model().registered_events.through
    if status == Registration.Status.CANCELLED:
        for user_id, event_id in pairs:
            through.objects.filter(user_id=user_id, event_id=event_id).delete()
        return
    through.objects.bulk_create(
        [through(user_id=user_id, event_id=event_id) for user_id, event_id in pairs],
        ignore_conflicts=True,
    )


def bulk_override_status(ids: list[int], status: str, actor) -> dict[str, int]:
    """Administrative override: write ``status`` directly, then recount.

    The single-transition rules are skipped on purpose; participant counters
    of every touched event are recomputed from their registrations afterwards
    and each user's ``registered_events`` follows the new status.
    """

    if status not in Registration.Status.values:
        msg = f"Invalid status '{status}'"
        raise ValidationError(msg)
    ids = sorted({int(pk) for pk in ids})
    with transaction.atomic():
        qs = Registration.objects.filter(pk__in=ids)
        event_ids = sorted(set(qs.values_list("event_id", flat=True)))
        before = dict(qs.values_list("pk", "status"))
        pairs = list(qs.values_list("user_id", "event_id"))
        updated = qs.update(status=status, updated_at=timezone.now())
        _sync_registered_events(pairs, status)
        reconciled = event_services.reconcile_participant_counts(event_ids)
        log_action(
            AuditLog.Action.REGISTRATION_BULK_OVERRIDE,
            actor=actor,
            message=f"status={status} count={updated}",
            model_name="registrations.Registration",
            before={str(pk): value for pk, value in before.items()},
            after={"status": status, "ids": ids},
        )
    logger.info(
        "Bulk override to %s: %s registrations, %s counters corrected",
        status,
        updated,
        reconciled,
    )
    return {"updated": updated, "events_reconciled": len(event_ids)}
