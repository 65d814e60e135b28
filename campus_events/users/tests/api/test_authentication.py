from datetime import timedelta
from http import HTTPStatus

import pytest
from rest_framework_simplejwt.tokens import AccessToken

pytestmark = pytest.mark.django_db


def _expired_token(user) -> str:
    token = AccessToken.for_user(user)
    token.set_exp(lifetime=-timedelta(seconds=1))
    return str(token)


def test_expired_token_is_reported(api_client, student):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {_expired_token(student)}")
    resp = api_client.get("/api/auth/profile")
    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.json() == {
        "success": False,
        "message": "Token expired",
        "code": "token_expired",
    }


def test_garbage_token_is_invalid(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not.a.jwt")
    resp = api_client.get("/api/auth/profile")
    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.json()["message"] == "Invalid token"


def test_token_of_deleted_user_is_invalid(student_client, student):
    student.delete()
    resp = student_client.get("/api/auth/profile")
    assert resp.status_code == HTTPStatus.UNAUTHORIZED
    assert resp.json()["code"] == "invalid_token"


def test_bad_token_on_public_endpoint_falls_back_to_anonymous(api_client, event):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not.a.jwt")
    resp = api_client.get(f"/api/events/{event.pk}")
    assert resp.status_code == HTTPStatus.OK
    assert resp.json()["data"]["is_registered"] is False
