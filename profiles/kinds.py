"""
Owned record kinds served by the secured field controller.

Each kind is a frozen configuration value, not a subclass: the controller behaves
the same for all of them and only reads these knobs.

- `owner_field`: relation on the model pointing at its owner (a `Profile`, or the
  user directly for principal-anchored kinds).
- `owner_has_many`: collection kind (bulk create/update, per-item delete, no
  singular fetch) versus singleton kind (create-if-missing on indirect update).
- `relation_name`: reverse accessor from the anchor to the kind, used to find the
  singleton of an anchor.
- `actions`: capabilities exposed for the kind (see `profiles.capabilities`).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from django.contrib.auth import get_user_model
from django.core.exceptions import ImproperlyConfigured

from .capabilities import DELETE, FIND, FIND_ONE, UPDATE
from .models import EmergencyContact, GeneralInfo, IdentityDocument, Person, Profile
from .serializers import (
    EmergencyContactSerializer,
    GeneralInfoSerializer,
    IdentityDocumentSerializer,
    PersonSerializer,
)


@dataclass(frozen=True)
class OwnedKind:
    name: str
    model: type
    serializer_class: type
    owner_field: str = "profile"
    owner_has_many: bool = False
    relation_name: str | None = None
    filter_fields: tuple[str, ...] = ()
    actions: frozenset[str] = field(default_factory=lambda: frozenset({FIND, FIND_ONE, UPDATE}))

    def __post_init__(self) -> None:
        if self.model is None:
            raise ImproperlyConfigured("OwnedKind: model is required")
        if self.owner_has_many and FIND_ONE in self.actions:
            raise ImproperlyConfigured(f"{self.name}: collection kinds do not support findOne")
        if not self.owner_has_many and DELETE in self.actions:
            raise ImproperlyConfigured(f"{self.name}: only collection kinds support delete")
        if not self.owner_has_many and not self.relation_name:
            raise ImproperlyConfigured(f"{self.name}: singleton kinds need relation_name")

    @property
    def owner_model(self) -> type:
        return self.model._meta.get_field(self.owner_field).related_model

    @property
    def anchored_on_profile(self) -> bool:
        return self.owner_model is Profile

    @property
    def principal_hop(self) -> str | None:
        """Relation from the owner record to the user, if the owner is not the user."""
        if self.owner_model is get_user_model():
            return None
        return "user"

    @property
    def principal_path(self) -> str:
        hop = self.principal_hop
        return f"{self.owner_field}.{hop}" if hop else self.owner_field

    @property
    def populate(self) -> tuple[str, ...]:
        """`select_related` paths loading the owner chain down to the user."""
        return (self.principal_path.replace(".", "__"),)

    def allows(self, capability: str) -> bool:
        return capability in self.actions


PERSON = OwnedKind(
    name="person",
    model=Person,
    serializer_class=PersonSerializer,
    relation_name="person",
    filter_fields=("first_name", "last_name", "nationality"),
)

IDENTITY_DOCUMENT = OwnedKind(
    name="identity-document",
    model=IdentityDocument,
    serializer_class=IdentityDocumentSerializer,
    relation_name="identity_document",
    filter_fields=("document_type", "issuing_country"),
)

EMERGENCY_CONTACT = OwnedKind(
    name="emergency-contact",
    model=EmergencyContact,
    serializer_class=EmergencyContactSerializer,
    owner_has_many=True,
    relation_name="emergency_contacts",
    filter_fields=("relationship", "first_name", "last_name"),
    actions=frozenset({FIND, UPDATE, DELETE}),
)

GENERAL_INFO = OwnedKind(
    name="general-info",
    model=GeneralInfo,
    serializer_class=GeneralInfoSerializer,
    owner_field="user",
    relation_name="general_info",
    filter_fields=("preferred_language",),
    actions=frozenset({FIND, UPDATE}),
)

KINDS: tuple[OwnedKind, ...] = (PERSON, IDENTITY_DOCUMENT, EMERGENCY_CONTACT, GENERAL_INFO)
