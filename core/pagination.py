"""
Pagination returning the `{"data": [...], "meta": {"pagination": {...}}}` envelope.

Request bodies on owned-record endpoints carry a `data` key; list responses use the
same key so clients read one shape everywhere.
"""

from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    page_size_query_param = "page_size"
    max_page_size = 100

    def get_paginated_response(self, data) -> Response:
        total = self.page.paginator.count
        page_size = self.page.paginator.per_page
        return Response(
            {
                "data": data,
                "meta": {
                    "pagination": {
                        "page": self.page.number,
                        "page_size": page_size,
                        "page_count": math.ceil(total / page_size) if page_size else 0,
                        "total": total,
                    }
                },
            }
        )

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            "type": "object",
            "required": ["data", "meta"],
            "properties": {
                "data": schema,
                "meta": {
                    "type": "object",
                    "properties": {
                        "pagination": {
                            "type": "object",
                            "properties": {
                                "page": {"type": "integer"},
                                "page_size": {"type": "integer"},
                                "page_count": {"type": "integer"},
                                "total": {"type": "integer"},
                            },
                        }
                    },
                },
            },
        }
