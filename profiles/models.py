"""
Per-user records reachable through the owned-record API.

Ownership graph
---------------
    User ──1:1── Profile ──1:N── Person              (singleton by convention)
                         ├─1:N── IdentityDocument    (singleton by convention)
                         └─1:N── EmergencyContact    (collection)
    User ──1:N── GeneralInfo                         (singleton by convention)

- `Profile` is the anchor: at most one per user (one-to-one column), created on
  first access by `profiles.provisioning.ensure_profile()`.
- Person / IdentityDocument / GeneralInfo uniqueness per owner is *advisory*: the
  create-if-missing path in the controller keeps it, nothing in the schema does.
- Owner columns (`profile`, `user`) are never writable through request payloads.
"""

from django.conf import settings
from django.db import models

from core.models import RecordModel


class Profile(RecordModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    display_name = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return self.display_name or f"Profile #{self.pk}"


class Gender(models.TextChoices):
    FEMALE = "female", "Female"
    MALE = "male", "Male"
    OTHER = "other", "Other"
    UNDISCLOSED = "undisclosed", "Prefer not to say"


class Person(RecordModel):
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="person")
    first_name = models.CharField(max_length=100, blank=True)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, choices=Gender.choices, blank=True)
    nationality = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or f"Person #{self.pk}"


class DocumentType(models.TextChoices):
    PASSPORT = "passport", "Passport"
    NATIONAL_ID = "national_id", "National ID card"
    DRIVER_LICENSE = "driver_license", "Driver license"
    RESIDENCE_PERMIT = "residence_permit", "Residence permit"
    OTHER = "other", "Other"


class IdentityDocument(RecordModel):
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="identity_document")
    document_type = models.CharField(max_length=32, choices=DocumentType.choices, blank=True)
    document_number = models.CharField(max_length=64, blank=True)
    issuing_country = models.CharField(max_length=100, blank=True)
    issued_on = models.DateField(null=True, blank=True)
    expires_on = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.get_document_type_display() or 'Document'} {self.document_number}".strip()


class EmergencyContact(RecordModel):
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="emergency_contacts")
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    relationship = models.CharField(max_length=64, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return f"{name} ({self.relationship})" if self.relationship else name or f"Contact #{self.pk}"


class GeneralInfo(RecordModel):
    """General preferences owned directly by the user (no profile hop)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="general_info",
    )
    display_name = models.CharField(max_length=150, blank=True)
    preferred_language = models.CharField(max_length=16, blank=True)
    time_zone = models.CharField(max_length=64, blank=True)
    bio = models.TextField(blank=True)

    class Meta:
        ordering = ("id",)
        verbose_name_plural = "general info"

    def __str__(self) -> str:
        return self.display_name or f"GeneralInfo #{self.pk}"
