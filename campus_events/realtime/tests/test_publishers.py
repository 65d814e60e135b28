from unittest import mock

import pytest

from campus_events.realtime.events import catalog
from campus_events.realtime.events import registrations
from campus_events.realtime.socketio import ROOM_ADMIN
from tests.factories import create_registration

pytestmark = pytest.mark.django_db


def test_event_created_broadcast(event):
    with mock.patch.object(catalog, "emit_event_to_all") as emit:
        catalog.publish_event_created(event)
    name, payload = emit.call_args.args
    assert name == "new-event"
    assert payload["event"]["id"] == event.pk
    assert payload["event"]["registration_status"] == "open"
    assert payload["message"] == f'New event "{event.title}" has been published!'


def test_event_updated_broadcast(event):
    with mock.patch.object(catalog, "emit_event_to_all") as emit:
        catalog.publish_event_updated(event)
    assert emit.call_args.args[0] == "event-updated"


def test_broadcast_failure_is_logged_not_raised(event, caplog):
    with mock.patch.object(catalog, "emit_event_to_all", side_effect=RuntimeError):
        catalog.publish_event_created(event)
    assert "Realtime broadcast of new-event failed" in caplog.text


def test_registration_goes_to_admin_room(student, event):
    registration = create_registration(student, event)
    with mock.patch.object(registrations, "emit_event_to_room") as emit:
        registrations.publish_registration_created(registration)
    room, name, payload = emit.call_args.args
    assert (room, name) == (ROOM_ADMIN, "new-registration")
    assert payload["registration"]["code"] == registration.code
    assert payload["registration"]["user"]["email"] == student.email
    assert payload["message"] == f'{student.name} registered for "{event.title}"'


def test_registration_push_failure_is_swallowed(student, event):
    registration = create_registration(student, event)
    with mock.patch.object(
        registrations,
        "emit_event_to_room",
        side_effect=ConnectionError,
    ):
        registrations.publish_registration_created(registration)
