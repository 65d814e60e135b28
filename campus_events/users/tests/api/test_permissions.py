from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from campus_events.users.api.permissions import ROLE_ADMIN
from campus_events.users.api.permissions import ROLE_STUDENT
from campus_events.users.api.permissions import HasRole
from campus_events.users.api.permissions import IsAdmin

pytestmark = pytest.mark.django_db


def _allows(permission_class, user) -> bool:
    return permission_class().has_permission(SimpleNamespace(user=user), view=None)


def test_has_role_admits_listed_roles(student, admin_user):
    either = HasRole(ROLE_STUDENT, ROLE_ADMIN)
    assert _allows(either, student)
    assert _allows(either, admin_user)
    assert _allows(HasRole(ROLE_STUDENT), student)
    assert not _allows(HasRole(ROLE_STUDENT), admin_user)


def test_has_role_rejects_anonymous():
    assert not _allows(HasRole(ROLE_STUDENT, ROLE_ADMIN), AnonymousUser())


def test_is_admin_is_a_role_gate(student, admin_user):
    assert IsAdmin.allowed_roles == (ROLE_ADMIN,)
    assert _allows(IsAdmin, admin_user)
    assert not _allows(IsAdmin, student)
    assert IsAdmin.message == "Access denied. Admin privileges required."


def test_superuser_passes_admin_gate(student):
    student.is_superuser = True
    assert _allows(IsAdmin, student)
    assert not _allows(HasRole("organizer"), student)
