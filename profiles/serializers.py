"""
DRF serializers for profile records.

These serializers are the validation/sanitization step of the owned-record
endpoints: the controller runs every incoming item through `is_valid()` with
`partial=True` and works on `validated_data` from then on.

Security
--------
- Owner columns (`profile`, `user`) are read-only here *and* stripped from
  validated payloads by the controller; clients can never re-parent a record.
- `id`, `document_id`, `status` and timestamps are server-managed.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import EmergencyContact, GeneralInfo, IdentityDocument, Person, Profile

RECORD_READ_ONLY = ["id", "document_id", "status", "created_at", "updated_at"]


class ProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Profile
        fields = RECORD_READ_ONLY + ["user", "email", "display_name"]
        read_only_fields = RECORD_READ_ONLY + ["user"]


class PersonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Person
        fields = RECORD_READ_ONLY + [
            "profile",
            "first_name",
            "middle_name",
            "last_name",
            "date_of_birth",
            "gender",
            "nationality",
            "phone",
        ]
        read_only_fields = RECORD_READ_ONLY + ["profile"]


class IdentityDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = IdentityDocument
        fields = RECORD_READ_ONLY + [
            "profile",
            "document_type",
            "document_number",
            "issuing_country",
            "issued_on",
            "expires_on",
        ]
        read_only_fields = RECORD_READ_ONLY + ["profile"]

    def validate(self, attrs):
        # Payload-level check only: the controller validates items unbound.
        issued, expires = attrs.get("issued_on"), attrs.get("expires_on")
        if issued and expires and expires < issued:
            raise serializers.ValidationError({"expires_on": "Expiry date cannot be before the issue date."})
        return attrs


class EmergencyContactSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmergencyContact
        fields = RECORD_READ_ONLY + [
            "profile",
            "first_name",
            "last_name",
            "relationship",
            "phone",
            "email",
        ]
        read_only_fields = RECORD_READ_ONLY + ["profile"]


class GeneralInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = GeneralInfo
        fields = RECORD_READ_ONLY + [
            "user",
            "display_name",
            "preferred_language",
            "time_zone",
            "bio",
        ]
        read_only_fields = RECORD_READ_ONLY + ["user"]
