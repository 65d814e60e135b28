from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from campus_events.audit.models import AuditLog
from campus_events.core.exceptions import AlreadyRegistered
from campus_events.core.exceptions import DeadlinePassed
from campus_events.core.exceptions import InvalidState
from campus_events.core.exceptions import RegistrationClosed
from campus_events.events.models import Event
from campus_events.registrations import services
from campus_events.registrations.models import Registration
from tests.factories import create_admin
from tests.factories import create_event
from tests.factories import create_registration
from tests.factories import create_student

pytestmark = pytest.mark.django_db


def _participants(event):
    event.refresh_from_db()
    return event.current_participants


class TestRegister:
    def test_confirms_and_counts(self, student, event):
        registration = services.register_for_event(
            student,
            event.pk,
            metadata={"source": "mobile", "ip_address": "10.0.0.1", "user_agent": "UA"},
        )
        assert registration.status == Registration.Status.CONFIRMED
        assert registration.payment_status == Registration.PaymentStatus.NOT_REQUIRED
        assert registration.payment_amount is None
        assert registration.code.startswith("REG-")
        assert registration.source == "mobile"
        assert registration.ip_address == "10.0.0.1"
        assert _participants(event) == 1
        assert list(student.registered_events.all()) == [event]

    def test_fee_leaves_payment_pending(self, student):
        event = create_event(fee=Decimal("150.00"))
        registration = services.register_for_event(student, event.pk)
        assert registration.payment_status == Registration.PaymentStatus.PENDING
        assert registration.payment_amount == Decimal("150.00")

    def test_unknown_event(self, student):
        with pytest.raises(NotFound):
            services.register_for_event(student, 999999)

    def test_unpublished_event(self, student):
        event = create_event(status=Event.Status.DRAFT)
        with pytest.raises(InvalidState):
            services.register_for_event(student, event.pk)

    @pytest.mark.parametrize(
        ("extra", "reason"),
        [
            ({"days": -1}, "the event has already started"),
            ({"days": 2, "registration_deadline_delta": -1}, "the deadline has passed"),
        ],
    )
    def test_closed(self, student, extra, reason):
        delta = extra.pop("registration_deadline_delta", None)
        if delta is not None:
            extra["registration_deadline"] = timezone.now() + timedelta(hours=delta)
        event = create_event(**extra)
        with pytest.raises(RegistrationClosed) as exc:
            services.register_for_event(student, event.pk)
        assert reason in str(exc.value.detail)

    def test_full(self, student):
        event = create_event(max_participants=1)
        create_registration(create_student(), event)
        with pytest.raises(RegistrationClosed) as exc:
            services.register_for_event(student, event.pk)
        assert "full" in str(exc.value.detail)
        assert _participants(event) == 1

    def test_zero_capacity_is_unlimited(self, student):
        event = create_event(max_participants=0)
        for _ in range(3):
            create_registration(create_student(), event)
        services.register_for_event(student, event.pk)
        assert _participants(event) == 4  # noqa: PLR2004

    def test_already_registered(self, student, event):
        services.register_for_event(student, event.pk)
        with pytest.raises(AlreadyRegistered):
            services.register_for_event(student, event.pk)
        assert _participants(event) == 1

    def test_cancelled_registration_still_blocks(self, student, event):
        create_registration(student, event, status=Registration.Status.CANCELLED)
        with pytest.raises(AlreadyRegistered):
            services.register_for_event(student, event.pk)

    def test_answers_validated(self, student):
        event = create_event(
            registration_fields=[{"name": "branch", "type": "text", "required": True}],
        )
        with pytest.raises(ValidationError):
            services.register_for_event(student, event.pk, {})
        assert not Registration.objects.exists()
        assert _participants(event) == 0

    def test_publishes_after_commit(self, student, event, django_capture_on_commit_callbacks):
        with (
            mock.patch(
                "campus_events.registrations.services.publish_registration_created",
            ) as publish,
            django_capture_on_commit_callbacks(execute=True),
        ):
            registration = services.register_for_event(student, event.pk)
        publish.assert_called_once_with(registration)


class TestCancel:
    def test_cancel_releases_seat(self, student, event):
        registration = create_registration(student, event)
        cancelled = services.cancel_registration(registration.pk, student, "Clash")
        assert cancelled.status == Registration.Status.CANCELLED
        assert cancelled.cancellation_reason == "Clash"
        assert cancelled.cancelled_at is not None
        assert _participants(event) == 0
        assert not student.registered_events.exists()
        entry = AuditLog.objects.get(action="registration_cancelled")
        assert entry.record_id == registration.pk
        assert entry.before == {"status": "confirmed"}

    def test_pending_cancel_keeps_counter(self, student, event):
        registration = create_registration(
            student,
            event,
            status=Registration.Status.PENDING,
        )
        services.cancel_registration(registration.pk, student)
        assert _participants(event) == 0

    def test_within_cutoff(self, student):
        event = create_event(days=0.5)
        registration = create_registration(student, event)
        with pytest.raises(DeadlinePassed) as exc:
            services.cancel_registration(registration.pk, student)
        assert "24 hours" in str(exc.value.detail)
        assert _participants(event) == 1

    @pytest.mark.parametrize(
        "lead",
        [timedelta(hours=24, minutes=1), timedelta(days=2)],
    )
    def test_outside_cutoff(self, student, lead):
        event = create_event(days=lead / timedelta(days=1))
        registration = create_registration(student, event)
        cancelled = services.cancel_registration(registration.pk, student)
        assert cancelled.status == Registration.Status.CANCELLED

    def test_exactly_at_cutoff(self, student, event):
        registration = create_registration(student, event)
        frozen = event.start_at - timedelta(hours=24)
        with mock.patch("django.utils.timezone.now", return_value=frozen):
            cancelled = services.cancel_registration(registration.pk, student)
        assert cancelled.cancelled_at == frozen

    def test_one_minute_inside_cutoff(self, student):
        event = create_event(days=timedelta(hours=23, minutes=59) / timedelta(days=1))
        registration = create_registration(student, event)
        with pytest.raises(DeadlinePassed):
            services.cancel_registration(registration.pk, student)
        registration.refresh_from_db()
        assert registration.status == Registration.Status.CONFIRMED

    def test_not_owner(self, student, event):
        registration = create_registration(student, event)
        with pytest.raises(PermissionDenied):
            services.cancel_registration(registration.pk, create_student())

    def test_admin_cannot_cancel_for_student(self, student, event):
        registration = create_registration(student, event)
        with pytest.raises(PermissionDenied):
            services.cancel_registration(registration.pk, create_admin())

    @pytest.mark.parametrize(
        "status",
        [Registration.Status.CANCELLED, Registration.Status.ATTENDED],
    )
    def test_terminal_states(self, student, event, status):
        registration = create_registration(student, event, status=status)
        with pytest.raises(InvalidState):
            services.cancel_registration(registration.pk, student)

    def test_missing(self, student):
        with pytest.raises(NotFound):
            services.cancel_registration(424242, student)


class TestAttendance:
    def test_check_in_promotes_confirmed(self, student, event):
        registration = create_registration(student, event)
        marked = services.mark_attendance(registration.pk, notes="On time")
        assert marked.status == Registration.Status.ATTENDED
        assert marked.checked_in is True
        assert marked.check_in_time is not None
        assert marked.attendance_notes == "On time"
        assert _participants(event) == 1

    def test_notes_are_appended(self, student, event):
        registration = create_registration(student, event)
        services.mark_attendance(registration.pk, notes="Arrived")
        marked = services.mark_attendance(registration.pk, check_in=False, notes="Left")
        assert marked.checked_out is True
        assert marked.check_out_time is not None
        assert marked.attendance_notes == "Arrived\nLeft"

    def test_pending_is_not_promoted(self, student, event):
        registration = create_registration(
            student,
            event,
            status=Registration.Status.PENDING,
        )
        marked = services.mark_attendance(registration.pk)
        assert marked.status == Registration.Status.PENDING
        assert marked.checked_in is True


class TestFeedback:
    def test_attended_may_submit(self, student):
        event = create_event(
            feedback_questions=[{"question": "Venue?", "type": "rating"}],
        )
        registration = create_registration(
            student,
            event,
            status=Registration.Status.ATTENDED,
        )
        updated = services.submit_feedback(
            registration.pk,
            student,
            rating=5,
            comments="Great",
            responses={"Venue?": 4},
        )
        assert updated.feedback_rating == 5  # noqa: PLR2004
        assert updated.feedback_responses == {"Venue?": 4}
        assert updated.feedback_submitted_at is not None

        again = services.submit_feedback(registration.pk, student, rating=3)
        assert again.feedback_rating == 3  # noqa: PLR2004
        assert again.feedback_comments == ""

    def test_requires_attendance(self, student, event):
        registration = create_registration(student, event)
        with pytest.raises(InvalidState) as exc:
            services.submit_feedback(registration.pk, student, rating=4)
        assert str(exc.value.detail) == "Feedback can only be submitted for attended events"

    def test_disabled(self, student):
        event = create_event(feedback_enabled=False)
        registration = create_registration(
            student,
            event,
            status=Registration.Status.ATTENDED,
        )
        with pytest.raises(InvalidState):
            services.submit_feedback(registration.pk, student, rating=4)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, student, event, rating):
        registration = create_registration(
            student,
            event,
            status=Registration.Status.ATTENDED,
        )
        with pytest.raises(ValidationError):
            services.submit_feedback(registration.pk, student, rating=rating)

    @pytest.mark.parametrize("rating", [1, 5])
    def test_rating_bounds_are_inclusive(self, student, event, rating):
        registration = create_registration(
            student,
            event,
            status=Registration.Status.ATTENDED,
        )
        updated = services.submit_feedback(registration.pk, student, rating=rating)
        assert updated.feedback_rating == rating

    def test_owner_only(self, student, event):
        registration = create_registration(
            student,
            event,
            status=Registration.Status.ATTENDED,
        )
        with pytest.raises(PermissionDenied):
            services.submit_feedback(registration.pk, create_student(), rating=4)


class TestQueries:
    def test_detail_visibility(self, student, event):
        registration = create_registration(student, event)
        assert services.registration_detail(registration.pk, student) == registration
        assert services.registration_detail(registration.pk, create_admin()) == registration
        with pytest.raises(PermissionDenied):
            services.registration_detail(registration.pk, create_student())

    def test_my_registrations_filter(self, student):
        kept = create_registration(student, create_event())
        create_registration(
            student,
            create_event(),
            status=Registration.Status.CANCELLED,
        )
        create_registration(create_student(), create_event())
        assert list(services.my_registrations(student, "confirmed")) == [kept]
        assert services.my_registrations(student).count() == 2  # noqa: PLR2004
        with pytest.raises(ValidationError):
            services.my_registrations(student, "lost")

    def test_stats(self, event):
        paid = create_event(fee=Decimal("100.00"))
        create_registration(create_student(), event)
        create_registration(
            create_student(),
            paid,
            payment_amount=Decimal("100.00"),
        )
        create_registration(
            create_student(),
            paid,
            status=Registration.Status.CANCELLED,
            payment_amount=Decimal("100.00"),
        )
        stats = services.registration_stats(paid.pk)
        assert stats["total_registrations"] == 2  # noqa: PLR2004
        assert stats["total_revenue"] == Decimal("200.00")
        by_status = {row["status"]: row["count"] for row in stats["status_counts"]}
        assert by_status == {"cancelled": 1, "confirmed": 1}
        assert services.registration_stats()["total_registrations"] == 3  # noqa: PLR2004

    def test_analytics_range(self, event):
        create_registration(create_student(), event)
        result = services.registration_analytics()
        assert len(result["recent_registrations"]) == 1
        assert result["overview"]["total_registrations"] == 1
        past = timezone.now() - timedelta(days=60)
        empty = services.registration_analytics(past, past + timedelta(days=1))
        assert empty["recent_registrations"] == []
        with pytest.raises(ValidationError):
            services.registration_analytics(timezone.now(), past)


class TestBulkOverride:
    def test_recounts_touched_events(self, admin_user):
        first, second = create_event(), create_event()
        a = create_registration(create_student(), first)
        b = create_registration(create_student(), first)
        c = create_registration(
            create_student(),
            second,
            status=Registration.Status.PENDING,
        )

        result = services.bulk_override_status(
            [a.pk, b.pk, c.pk, a.pk],
            Registration.Status.CANCELLED,
            actor=admin_user,
        )
        assert result == {"updated": 3, "events_reconciled": 2}
        assert _participants(first) == 0
        assert _participants(second) == 0

        services.bulk_override_status([c.pk], Registration.Status.ATTENDED, admin_user)
        assert _participants(second) == 1
        entry = AuditLog.objects.filter(action="registration_bulk_override").first()
        assert entry.actor == admin_user
        assert entry.after == {"status": "attended", "ids": [c.pk]}

    def test_registered_events_follow_override(self, admin_user):
        event = create_event()
        owner = create_student()
        registration = create_registration(owner, event)

        services.bulk_override_status(
            [registration.pk],
            Registration.Status.CANCELLED,
            admin_user,
        )
        assert not owner.registered_events.filter(pk=event.pk).exists()

        services.bulk_override_status(
            [registration.pk],
            Registration.Status.CONFIRMED,
            admin_user,
        )
        assert list(owner.registered_events.all()) == [event]
        assert _participants(event) == 1

    def test_invalid_status(self, admin_user):
        with pytest.raises(ValidationError):
            services.bulk_override_status([1], "lost", admin_user)

    def test_unknown_ids(self, admin_user):
        result = services.bulk_override_status([987654], "confirmed", admin_user)
        assert result == {"updated": 0, "events_reconciled": 0}
