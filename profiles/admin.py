"""
Django admin registrations for profile records.

Back-office only. `list_display` keeps the owner chain visible so operators can
tell whose record they are looking at; searches traverse to the account email.
"""

from __future__ import annotations

from django.contrib import admin

from .models import EmergencyContact, GeneralInfo, IdentityDocument, Person, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "display_name", "status", "created_at")
    search_fields = ("user__email", "user__username", "display_name")
    list_filter = ("status",)


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    """Personal details, one per profile."""
    list_display = ("id", "profile", "first_name", "last_name", "nationality", "status")
    search_fields = ("first_name", "last_name", "profile__user__email")
    list_filter = ("status", "gender")


@admin.register(IdentityDocument)
class IdentityDocumentAdmin(admin.ModelAdmin):
    """Identity documents; the document number is searchable for support lookups."""
    list_display = ("id", "profile", "document_type", "issuing_country", "expires_on", "status")
    search_fields = ("document_number", "profile__user__email")
    list_filter = ("document_type", "status")


@admin.register(EmergencyContact)
class EmergencyContactAdmin(admin.ModelAdmin):
    list_display = ("id", "profile", "first_name", "last_name", "relationship", "phone")
    search_fields = ("first_name", "last_name", "phone", "profile__user__email")
    list_filter = ("relationship",)


@admin.register(GeneralInfo)
class GeneralInfoAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "display_name", "preferred_language", "time_zone")
    search_fields = ("user__email", "display_name")
