"""
ViewSets for profile records.

Highlights
----------
- `OwnedRecordViewSet`: HTTP glue around `SecuredFieldController` for one
  `OwnedKind`. Route ids accept dots and `@` so `user=<email>` identifiers reach
  the controller intact.
    * GET    /{kind}/          list, scoped to the caller (+ caller filters, paging)
    * GET    /{kind}/{id}/     single record (singleton kinds only; collections
                               use GET /{kind}/?id=<id>)
    * PUT    /{kind}/{id}/     update / create-if-missing / bulk mixed update
    * PATCH  /{kind}/{id}/     same as PUT (updates are always partial)
    * DELETE /{kind}/{id}/     single or bulk delete (collection kinds only)
  Actions a kind does not declare answer 405.
- `ProfileViewSet`: read-only profile access plus `/profiles/me/`, which
  provisions the caller's profile on first use.

Responses
---------
Single results and arrays come back as `{"data": ...}`; lists use the envelope
pagination (`{"data": [...], "meta": {"pagination": {...}}}`).
"""

from __future__ import annotations

from django.utils.functional import cached_property
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.authentication import resolve_principal_id
from core.permissions import IsOwner
from profiles import kinds
from profiles.capabilities import ACTION_CAPABILITIES, PROFILE_CAPABILITIES
from profiles.controller import SecuredFieldController
from profiles.models import Profile
from profiles.ownership import scope_to_principal
from profiles.provisioning import ensure_profile
from profiles.schema import (
    BULK_DELETE_EXAMPLE,
    BULK_UPDATE_EXAMPLE,
    ERROR_RESPONSE,
    RECORD_LOOKUP_PARAM,
    bulk_envelope,
    data_envelope,
)
from profiles.serializers import ProfileSerializer


class OwnedRecordViewSet(viewsets.GenericViewSet):
    """Owner-checked endpoints for the configured `kind`."""

    kind: kinds.OwnedKind = None
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"[^/]+"
    ordering_fields = ["id", "created_at", "updated_at"]

    @cached_property
    def controller(self) -> SecuredFieldController:
        return SecuredFieldController(self.kind)

    @property
    def filterset_fields(self):
        # `?id=` / `?document_id=` narrow the scoped list to one record.
        return ["id", "document_id", *self.kind.filter_fields]

    def get_serializer_class(self):
        return self.kind.serializer_class

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return self.kind.model.objects.none()
        return self.controller.find(self.request)

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        capability = ACTION_CAPABILITIES.get(self.action)
        if capability is not None and not self.kind.allows(capability):
            raise MethodNotAllowed(request.method)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.controller.serialize(page, request, many=True))
        return Response({"data": self.controller.serialize(queryset, request, many=True)})

    def retrieve(self, request, pk=None, *args, **kwargs):
        return Response({"data": self.controller.find_one(request, pk)})

    def update(self, request, pk=None, *args, **kwargs):
        return Response({"data": self.controller.update(request, pk)})

    def partial_update(self, request, pk=None, *args, **kwargs):
        return self.update(request, pk, *args, **kwargs)

    def destroy(self, request, pk=None, *args, **kwargs):
        return Response({"data": self.controller.delete(request, pk)})


def _request_envelope(kind: kinds.OwnedKind, many: bool = False):
    suffix = "BulkRequest" if many else "Request"
    return data_envelope(f"{kind.model.__name__}{suffix}", kind.serializer_class, many=many)


def _singleton_schema(tag: str, kind: kinds.OwnedKind, label: str):
    envelope = data_envelope(f"{kind.model.__name__}Envelope", kind.serializer_class)
    update = extend_schema(
        tags=[tag],
        parameters=[RECORD_LOOKUP_PARAM],
        request=_request_envelope(kind),
        responses={200: envelope, 400: ERROR_RESPONSE, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
        description=(
            f"Partially update the {label}. With `user=<email>` the record is created "
            "first when the caller has none."
        ),
    )
    return extend_schema_view(
        list=extend_schema(tags=[tag], description=f"List the caller's {label} records."),
        retrieve=extend_schema(
            tags=[tag],
            parameters=[RECORD_LOOKUP_PARAM],
            responses={200: envelope, 403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
            description=f"Fetch the {label} by id or by `user=<email>`.",
        ),
        update=update,
        partial_update=update,
        destroy=extend_schema(exclude=True),
    )


@_singleton_schema("Persons", kinds.PERSON, "person")
class PersonViewSet(OwnedRecordViewSet):
    kind = kinds.PERSON


@_singleton_schema("Identity documents", kinds.IDENTITY_DOCUMENT, "identity document")
class IdentityDocumentViewSet(OwnedRecordViewSet):
    kind = kinds.IDENTITY_DOCUMENT


@extend_schema_view(
    list=extend_schema(tags=["General info"], description="List the caller's general info."),
    retrieve=extend_schema(exclude=True),
    update=extend_schema(
        tags=["General info"],
        parameters=[RECORD_LOOKUP_PARAM],
        request=_request_envelope(kinds.GENERAL_INFO),
        responses={200: data_envelope("GeneralInfoEnvelope", kinds.GENERAL_INFO.serializer_class)},
        description="Partially update general info; `user=<email>` creates it when missing.",
    ),
    partial_update=extend_schema(tags=["General info"], parameters=[RECORD_LOOKUP_PARAM]),
    destroy=extend_schema(exclude=True),
)
class GeneralInfoViewSet(OwnedRecordViewSet):
    kind = kinds.GENERAL_INFO


@extend_schema_view(
    list=extend_schema(tags=["Emergency contacts"], description="List the caller's emergency contacts."),
    retrieve=extend_schema(exclude=True),
    update=extend_schema(
        tags=["Emergency contacts"],
        parameters=[RECORD_LOOKUP_PARAM],
        request=_request_envelope(kinds.EMERGENCY_CONTACT, many=True),
        responses={200: bulk_envelope("EmergencyContactBulkEnvelope"), 400: ERROR_RESPONSE,
                   403: ERROR_RESPONSE, 404: ERROR_RESPONSE},
        examples=[BULK_UPDATE_EXAMPLE],
        description=(
            "By id: update one contact. By `user=<email>`: array of items; items with "
            "`id` update, items without are created. Input order is preserved."
        ),
    ),
    partial_update=extend_schema(tags=["Emergency contacts"], parameters=[RECORD_LOOKUP_PARAM]),
    destroy=extend_schema(
        tags=["Emergency contacts"],
        parameters=[RECORD_LOOKUP_PARAM],
        request=bulk_envelope("EmergencyContactDeleteRequest"),
        responses={200: bulk_envelope("EmergencyContactDeleteEnvelope"), 403: ERROR_RESPONSE,
                   404: ERROR_RESPONSE},
        examples=[BULK_DELETE_EXAMPLE],
        description=(
            "By id: delete one contact. By `user=<email>`: delete every listed id, "
            "or none of them if any is missing or not owned."
        ),
    ),
)
class EmergencyContactViewSet(OwnedRecordViewSet):
    kind = kinds.EMERGENCY_CONTACT


@extend_schema_view(
    list=extend_schema(tags=["Profiles"], description="List the caller's profile."),
    retrieve=extend_schema(tags=["Profiles"], description="Retrieve the caller's profile by id."),
)
class ProfileViewSet(viewsets.GenericViewSet):
    """Read-only profile access, owner scoped (profiles are never deleted here)."""

    permission_classes = [IsAuthenticated, IsOwner]
    owner_path = "user"
    lookup_value_regex = r"\d+"
    queryset = Profile.objects.select_related("user")
    serializer_class = ProfileSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return queryset.none()
        return scope_to_principal(queryset, self.owner_path, resolve_principal_id(self.request))

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        capability = ACTION_CAPABILITIES.get(self.action)
        if capability is not None and capability not in PROFILE_CAPABILITIES:
            raise MethodNotAllowed(request.method)

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response({"data": self.get_serializer(queryset, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response({"data": self.get_serializer(self.get_object()).data})

    @extend_schema(
        tags=["Profiles"],
        responses={200: data_envelope("ProfileEnvelope", ProfileSerializer)},
        description="Return the caller's profile, creating it on first access.",
    )
    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        resolve_principal_id(request)
        profile = ensure_profile(request.user)
        return Response({"data": self.get_serializer(profile).data})
