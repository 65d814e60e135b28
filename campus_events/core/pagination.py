"""Page/limit pagination rendered inside the response envelope."""

from __future__ import annotations

import math
from typing import Any

from rest_framework.pagination import BasePagination

from .responses import envelope

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class EnvelopePagination(BasePagination):
    """``?page=&limit=`` pagination.

    The page of items is returned under ``results_key`` next to a
    ``pagination`` block: ``{current, pages, total, limit}``. A page past
    the end yields an empty list rather than a 404.
    """

    page_query_param = "page"
    limit_query_param = "limit"
    default_limit = DEFAULT_LIMIT
    max_limit = MAX_LIMIT
    results_key = "results"

    def paginate_queryset(self, queryset, request, view=None):
        self.page_number = _positive_int(
            request.query_params.get(self.page_query_param),
            1,
        )
        self.limit = min(
            _positive_int(
                request.query_params.get(self.limit_query_param),
                self.default_limit,
            ),
            self.max_limit,
        )
        self.total = queryset.count()
        offset = (self.page_number - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    def get_pagination_block(self) -> dict[str, int]:
        return {
            "current": self.page_number,
            "pages": math.ceil(self.total / self.limit) if self.total else 0,
            "total": self.total,
            "limit": self.limit,
        }

    def get_paginated_data(self, data, **extra) -> dict[str, Any]:
        return {
            **extra,
            self.results_key: data,
            "pagination": self.get_pagination_block(),
        }

    def get_paginated_response(self, data):
        return envelope(self.get_paginated_data(data))

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": {
                    "type": "object",
                    "properties": {
                        self.results_key: schema,
                        "pagination": {
                            "type": "object",
                            "properties": {
                                "current": {"type": "integer"},
                                "pages": {"type": "integer"},
                                "total": {"type": "integer"},
                                "limit": {"type": "integer"},
                            },
                        },
                    },
                },
            },
        }

    def get_schema_operation_parameters(self, view):
        return [
            {
                "name": self.page_query_param,
                "required": False,
                "in": "query",
                "schema": {"type": "integer", "minimum": 1},
            },
            {
                "name": self.limit_query_param,
                "required": False,
                "in": "query",
                "schema": {"type": "integer", "minimum": 1, "maximum": MAX_LIMIT},
            },
        ]


def paginator_for(
    results_key: str,
    default_limit: int = DEFAULT_LIMIT,
) -> type[EnvelopePagination]:
    """Build a pagination class that names its item list ``results_key``."""

    return type(
        f"{results_key.title().replace('_', '')}Pagination",
        (EnvelopePagination,),
        {"results_key": results_key, "default_limit": default_limit},
    )
