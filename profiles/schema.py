"""
drf-spectacular helpers for the owned-record endpoints.

- `RECORD_LOOKUP_PARAM`: documents the `{id}` path segment grammar (direct id,
  document UUID or `user=<email>` indirection).
- Request/response envelopes (`{"data": ...}`) and the shared error shape.

Imported at startup by `profiles.apps.ProfilesConfig.ready()`; side-effect free.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, inline_serializer
from rest_framework import serializers

RECORD_LOOKUP_PARAM = OpenApiParameter(
    name="id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description=(
        "Record id, record document UUID, or `user=<email>` to address the caller's "
        "own record(s) through their account email (percent-encoded)."
    ),
)

ERROR_RESPONSE = OpenApiResponse(
    response=inline_serializer(
        name="RecordError",
        fields={"detail": serializers.CharField()},
    ),
    description="Error response",
)


def data_envelope(name: str, serializer_class, many: bool = False):
    """Inline `{"data": <record|[records]>}` serializer for schema purposes."""
    inner = serializer_class(many=True) if many else serializer_class(allow_null=True)
    return inline_serializer(name=name, fields={"data": inner})


def bulk_envelope(name: str):
    return inline_serializer(
        name=name,
        fields={"data": serializers.ListField(child=serializers.JSONField())},
    )


BULK_UPDATE_EXAMPLE = OpenApiExample(
    name="Mixed update/create",
    description="Items with `id` update that record; items without one are created.",
    value={
        "data": [
            {"id": 301, "phone": "+1-555-9999"},
            {"first_name": "Sarah", "relationship": "Friend"},
        ]
    },
    request_only=True,
)

BULK_DELETE_EXAMPLE = OpenApiExample(
    name="Bulk delete",
    description="Ids may be bare values or `{id}` objects. Nothing is deleted unless all pass.",
    value={"data": [301, {"id": 302}]},
    request_only=True,
)
