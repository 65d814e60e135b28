import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from campus_events.users.authentication import issue_token
from tests.factories import create_admin
from tests.factories import create_event
from tests.factories import create_student


@pytest.fixture(autouse=True)
def _clear_cache():
    # Rate-limiter windows live in the cache.
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def student(db):
    return create_student()


@pytest.fixture
def admin_user(db):
    return create_admin()


@pytest.fixture
def event(db, admin_user):
    return create_event(organizer=admin_user)


def bearer(client: APIClient, user) -> APIClient:
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
    return client


@pytest.fixture
def student_client(student) -> APIClient:
    return bearer(APIClient(), student)


@pytest.fixture
def admin_client(admin_user) -> APIClient:
    return bearer(APIClient(), admin_user)
