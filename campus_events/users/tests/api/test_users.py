from http import HTTPStatus
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from campus_events.audit.models import AuditLog
from campus_events.core.exceptions import DuplicateKey
from campus_events.users.services import admin_update_user
from tests.factories import create_student

pytestmark = pytest.mark.django_db
User = get_user_model()


class TestUserList:
    def test_students_are_denied(self, student_client):
        resp = student_client.get("/api/users")
        assert resp.status_code == HTTPStatus.FORBIDDEN

    def test_anonymous_is_unauthenticated(self, api_client):
        resp = api_client.get("/api/users")
        assert resp.status_code == HTTPStatus.UNAUTHORIZED

    def test_paginated_envelope(self, admin_client):
        for _ in range(3):
            create_student()
        resp = admin_client.get("/api/users", {"limit": 2, "page": 2})
        assert resp.status_code == HTTPStatus.OK
        data = resp.json()["data"]
        assert len(data["users"]) == 2  # noqa: PLR2004
        assert data["pagination"] == {"current": 2, "pages": 2, "total": 4, "limit": 2}

    def test_search_and_role_filter(self, admin_client):
        create_student(name="Meera Iyer", student_id="XY9")
        create_student(name="Someone Else")
        resp = admin_client.get("/api/users", {"search": "meera", "role": "student"})
        users = resp.json()["data"]["users"]
        assert [u["name"] for u in users] == ["Meera Iyer"]

        resp = admin_client.get("/api/users", {"search": "xy9"})
        assert len(resp.json()["data"]["users"]) == 1

    def test_password_never_serialized(self, admin_client):
        resp = admin_client.get("/api/users")
        for user in resp.json()["data"]["users"]:
            assert "password" not in user


class TestUserDetail:
    def test_retrieve(self, admin_client, student):
        resp = admin_client.get(f"/api/users/{student.pk}")
        assert resp.status_code == HTTPStatus.OK
        assert resp.json()["data"]["user"]["email"] == student.email

    def test_missing_user(self, admin_client):
        resp = admin_client.get("/api/users/99999")
        assert resp.status_code == HTTPStatus.NOT_FOUND
        assert resp.json()["message"] == "User not found"

    def test_update_allow_listed_fields(self, admin_client, student):
        resp = admin_client.put(
            f"/api/users/{student.pk}/",
            {"role": "admin", "is_verified": True, "password": "sneaky123"},
            format="json",
        )
        assert resp.status_code == HTTPStatus.OK
        assert resp.json()["message"] == "User updated successfully"
        student.refresh_from_db()
        assert student.role == User.Role.ADMIN
        assert student.is_verified is True
        assert not student.check_password("sneaky123")
        assert AuditLog.objects.filter(action="user_updated", record_id=student.pk).exists()

    def test_update_to_taken_email(self, admin_client, admin_user, student):
        resp = admin_client.put(
            f"/api/users/{student.pk}",
            {"email": admin_user.email.upper()},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST
        assert resp.json()["message"] == "User already exists with this email"

    def test_update_email_race_maps_to_duplicate_key(self, admin_user, student):
        original = student.email
        with patch.object(QuerySet, "exists", return_value=False):
            with pytest.raises(DuplicateKey) as excinfo:
                admin_update_user(student, {"email": admin_user.email})
        assert str(excinfo.value.detail) == "User already exists with this email"
        assert User.objects.get(pk=student.pk).email == original

    def test_delete(self, admin_client, student):
        resp = admin_client.delete(f"/api/users/{student.pk}")
        assert resp.status_code == HTTPStatus.OK
        assert resp.json()["message"] == "User deleted successfully"
        assert not User.objects.filter(pk=student.pk).exists()
        assert AuditLog.objects.filter(action="user_deleted", record_id=student.pk).exists()

    def test_self_delete_is_forbidden(self, admin_client, admin_user):
        resp = admin_client.delete(f"/api/users/{admin_user.pk}")
        assert resp.status_code == HTTPStatus.BAD_REQUEST
        assert resp.json()["message"] == "Cannot delete your own account"
        assert User.objects.filter(pk=admin_user.pk).exists()
