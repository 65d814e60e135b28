import pytest
from django.contrib.auth import get_user_model
from django.test import override_settings

from campus_events.users.auth_backends import EmailBackend

pytestmark = pytest.mark.django_db
User = get_user_model()

BACKENDS = ["campus_events.users.auth_backends.EmailBackend"]


class TestEmailBackend:
    def setup_method(self):
        self.backend = EmailBackend()
        self.password = "campus-pass1"  # noqa: S105
        self.user = User.objects.create_user(
            name="Test User",
            email="test@college.edu",
            password=self.password,
        )

    @override_settings(AUTHENTICATION_BACKENDS=BACKENDS)
    def test_authenticate_with_email(self):
        user = self.backend.authenticate(
            None,
            email="test@college.edu",
            password=self.password,
        )
        assert user == self.user

    @override_settings(AUTHENTICATION_BACKENDS=BACKENDS)
    def test_email_lookup_ignores_case(self):
        user = self.backend.authenticate(
            None,
            username="  TEST@College.EDU ",
            password=self.password,
        )
        assert user == self.user

    @override_settings(AUTHENTICATION_BACKENDS=BACKENDS)
    def test_authenticate_with_unknown_email(self):
        user = self.backend.authenticate(
            None,
            email="wrong@college.edu",
            password=self.password,
        )
        assert user is None

    @override_settings(AUTHENTICATION_BACKENDS=BACKENDS)
    def test_wrong_password(self):
        user = self.backend.authenticate(
            None,
            email="test@college.edu",
            password="wrongpass",  # noqa: S106
        )
        assert user is None

    @override_settings(AUTHENTICATION_BACKENDS=BACKENDS)
    def test_inactive_user_is_rejected(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])
        user = self.backend.authenticate(
            None,
            email="test@college.edu",
            password=self.password,
        )
        assert user is None

    def test_missing_credentials(self):
        assert self.backend.authenticate(None, password=self.password) is None
        assert self.backend.authenticate(None, email="test@college.edu") is None
