import pytest
from django.contrib.auth import get_user_model

pytestmark = pytest.mark.django_db
User = get_user_model()


def test_email_is_normalized_on_save():
    user = User.objects.create_user(
        name="Mixed Case",
        email="Mixed.Case@College.EDU",
        password="secret123",  # noqa: S106
    )
    assert user.email == "mixed.case@college.edu"


def test_blank_student_ids_do_not_collide():
    first = User.objects.create_user(
        name="One",
        email="one@college.edu",
        password="secret123",  # noqa: S106
        student_id="",
    )
    second = User.objects.create_user(
        name="Two",
        email="two@college.edu",
        password="secret123",  # noqa: S106
        student_id="   ",
    )
    assert first.student_id is None
    assert second.student_id is None


def test_password_is_stored_hashed():
    user = User.objects.create_user(
        name="Hash",
        email="hash@college.edu",
        password="secret123",  # noqa: S106
    )
    assert user.password != "secret123"  # noqa: S105
    assert user.check_password("secret123")


def test_default_preferences():
    user = User.objects.create_user(
        name="Prefs",
        email="prefs@college.edu",
        password="secret123",  # noqa: S106
    )
    assert user.preferences == {
        "email_notifications": True,
        "sms_notifications": False,
        "event_categories": [],
    }


def test_superuser_is_admin():
    user = User.objects.create_superuser(
        name="Root",
        email="root@college.edu",
        password="secret123",  # noqa: S106
    )
    assert user.role == User.Role.ADMIN
    assert user.is_admin
    assert user.is_staff
