import pytest
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from campus_events.core.pagination import paginator_for
from campus_events.users.models import User
from tests.factories import create_student

pytestmark = pytest.mark.django_db
factory = APIRequestFactory()


def _paginate(query, key="items"):
    paginator = paginator_for(key)()
    request = Request(factory.get("/", query))
    page = paginator.paginate_queryset(User.objects.order_by("pk"), request)
    return paginator, page


def test_defaults():
    for _ in range(12):
        create_student()
    paginator, page = _paginate({})
    assert len(page) == 10  # noqa: PLR2004
    assert paginator.get_pagination_block() == {
        "current": 1,
        "pages": 2,
        "total": 12,
        "limit": 10,
    }


def test_limit_is_capped_and_bad_values_fall_back():
    create_student()
    paginator, _ = _paginate({"limit": "1000", "page": "-3"})
    assert paginator.limit == 100  # noqa: PLR2004
    assert paginator.page_number == 1

    paginator, _ = _paginate({"limit": "abc"})
    assert paginator.limit == 10  # noqa: PLR2004


def test_page_past_the_end_is_empty():
    create_student()
    paginator, page = _paginate({"page": "5"})
    assert page == []
    assert paginator.get_pagination_block()["pages"] == 1


def test_empty_result_has_zero_pages():
    paginator, page = _paginate({})
    assert page == []
    assert paginator.get_pagination_block()["pages"] == 0


def test_results_key_and_extras():
    create_student()
    paginator, page = _paginate({}, key="results")
    data = paginator.get_paginated_data(["x"], query="tech")
    assert data["query"] == "tech"
    assert data["results"] == ["x"]
    assert "pagination" in data
