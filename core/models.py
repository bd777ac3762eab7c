from __future__ import annotations

"""
Core data models shared across the project.

This module provides:
- `RecordStatus`: publication state carried by every stored record.
- `RecordModel`: abstract base with an alternate stable reference (`document_id`),
  publication status and audit timestamps.

Addressing
----------
- Records are addressed either by their integer primary key or by `document_id`
  (a UUID). Both are stable for the lifetime of the row and are accepted
  interchangeably by the owned-record endpoints (see `core.utils.identifiers`).
"""

import uuid

from django.db import models


class RecordStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class RecordQuerySet(models.QuerySet):
    """Query helpers shared by every record model."""

    def by_ref(self, ref: dict | None):
        """
        Filter by a parsed record reference (`{"pk": ...}` or `{"document_id": ...}`).

        Unparseable references (None) match nothing.
        """
        if not ref:
            return self.none()
        return self.filter(**ref)


class RecordModel(models.Model):
    """
    Abstract base for stored records.

    Fields:
        document_id: alternate stable reference (UUID), usable instead of `id`.
        status: publication state; rows created through the API are published.
        created_at / updated_at: standard audit timestamps.
    """

    document_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.PUBLISHED,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RecordQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)} document_id={self.document_id}>"
