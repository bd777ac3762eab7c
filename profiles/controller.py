"""
Secured field controller: owner-checked list/get/update/delete for one owned kind.

Identifier resolution
---------------------
Every single-record route takes either
- a direct identifier (`42` or a `document_id` UUID), or
- an indirection identifier `user=<email>` (key from `settings.OWNER_LOOKUP_KEY`),
  which resolves the owning user by email and then that user's record(s).

Ownership protocol
------------------
- Direct ids: the record is fetched with its owner chain loaded, and its owning
  user must be the caller (403 otherwise). A missing record reads as `None`.
- Indirection: the email must belong to the caller (404 for unknown emails, 403
  for someone else's), and the caller's profile is provisioned on the way.
- Owner columns are stripped from every payload item after validation, so no
  request can move a record to another owner.

Collections
-----------
`update` on a collection kind takes an array: items with an `id` update that
record after an ownership check, items without one are created under the
resolved profile. Results keep input order. Items are processed one by one; an
error part-way leaves the earlier items applied.

Bulk delete checks every target first and deletes only when all of them pass.
With `settings.ATOMIC_BULK_DELETE` (default) both phases run in one transaction
and the targets are row-locked, so nothing can change between check and delete.
With it off the phases run back to back with no such protection.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import MethodNotAllowed, NotFound, ParseError, PermissionDenied

from core.authentication import resolve_principal_id
from core.models import RecordStatus
from core.utils.identifiers import parse_indirect_identifier, parse_record_ref
from core.utils.paths import delete_path

from .kinds import OwnedKind
from .ownership import owner_of, scope_to_principal
from .provisioning import ensure_profile

logger = logging.getLogger(__name__)

READ_DENIED = "You do not have permission to access this resource."
WRITE_DENIED = "You do not have permission to modify this resource."
MISSING_DATA = 'Missing "data" payload in the request body'


class SecuredFieldController:
    """Owner-checked operations for one `OwnedKind`."""

    def __init__(self, kind: OwnedKind, lookup_key: str | None = None) -> None:
        self.kind = kind
        self._lookup_key = lookup_key

    @property
    def lookup_key(self) -> str:
        return self._lookup_key or getattr(settings, "OWNER_LOOKUP_KEY", "user")

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------
    def base_queryset(self):
        return self.kind.model.objects.select_related(*self.kind.populate)

    def _fetch(self, raw_id, *, lock: bool = False):
        queryset = self.base_queryset()
        if lock:
            queryset = queryset.select_for_update(of=("self",))
        return queryset.by_ref(parse_record_ref(raw_id)).first()

    def _find_singleton(self, anchor):
        return getattr(anchor, self.kind.relation_name).order_by("pk").first()

    def _create(self, anchor, data: dict):
        record = self.kind.model.objects.create(
            **{self.kind.owner_field: anchor},
            status=RecordStatus.PUBLISHED,
            **data,
        )
        logger.info("created %s id=%s for owner id=%s", self.kind.name, record.pk, anchor.pk)
        return record

    def _apply(self, record, data: dict, request):
        return self.kind.serializer_class(context={"request": request}).update(record, data)

    def serialize(self, value, request, many: bool = False):
        return self.kind.serializer_class(value, many=many, context={"request": request}).data

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------
    def _resolve_owner_user(self, email: str, principal_id, denied: str):
        email = email.lower()
        owner_user = get_user_model().objects.by_email(email)
        if owner_user is None:
            raise NotFound(f'Owner with email "{email}" was not found.')
        if owner_user.pk != principal_id:
            logger.warning(
                "%s: principal id=%s denied access to records of user id=%s",
                self.kind.name, principal_id, owner_user.pk,
            )
            raise PermissionDenied(denied)
        return owner_user

    def _anchor_for(self, owner_user):
        if self.kind.anchored_on_profile:
            return ensure_profile(owner_user)
        return owner_user

    def _check_bulk_size(self, items: list) -> None:
        limit = int(getattr(settings, "MAX_BULK_ITEMS", 100))
        if limit and len(items) > limit:
            raise ParseError(f"Too many items: at most {limit} per request.")

    @staticmethod
    def _split_ids(items: list) -> tuple[list, list]:
        """Pull each item's `id` out, keeping positions aligned with the stripped items."""
        ids, stripped = [], []
        for item in items:
            if isinstance(item, Mapping) and "id" in item:
                ids.append(item["id"] or None)
                stripped.append({k: v for k, v in item.items() if k != "id"})
            else:
                ids.append(None)
                stripped.append(item)
        return ids, stripped

    def _sanitize(self, payload, request):
        many = isinstance(payload, list)
        serializer = self.kind.serializer_class(
            data=payload, many=many, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        items = [dict(item) for item in serializer.validated_data] if many else [dict(serializer.validated_data)]
        for item in items:
            delete_path(item, self.kind.owner_field)
        return items if many else items[0]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def find(self, request):
        """Caller-scoped queryset; the view merges caller filters and paginates."""
        principal_id = resolve_principal_id(request)
        return scope_to_principal(self.base_queryset(), self.kind.principal_path, principal_id)

    def find_one(self, request, raw_id):
        if self.kind.owner_has_many:
            raise MethodNotAllowed(request.method)

        principal_id = resolve_principal_id(request)
        email = parse_indirect_identifier(raw_id, self.lookup_key)

        if email is None:
            existing = self._fetch(raw_id)
            if existing is None:
                return None
            if owner_of(existing, self.kind) != principal_id:
                raise PermissionDenied(READ_DENIED)
            return self.serialize(existing, request)

        owner_user = self._resolve_owner_user(email, principal_id, READ_DENIED)
        record = self._find_singleton(self._anchor_for(owner_user))
        if record is None:
            return None
        return self.serialize(record, request)

    def update(self, request, raw_id):
        principal_id = resolve_principal_id(request)

        body = request.data
        payload = body.get("data") if isinstance(body, Mapping) else None
        if not isinstance(payload, (Mapping, list)):
            raise ParseError(MISSING_DATA)
        if isinstance(payload, list) and not self.kind.owner_has_many:
            raise ParseError("Data must be an object")

        item_ids: list = []
        if isinstance(payload, list):
            self._check_bulk_size(payload)
            item_ids, payload = self._split_ids(payload)

        sanitized = self._sanitize(payload, request)
        email = parse_indirect_identifier(raw_id, self.lookup_key)

        if email is None:
            if isinstance(sanitized, list):
                raise ParseError("Data must be an object when addressing a single record")
            existing = self._fetch(raw_id)
            if existing is None:
                return None
            if owner_of(existing, self.kind) != principal_id:
                raise PermissionDenied(WRITE_DENIED)
            return self.serialize(self._apply(existing, sanitized, request), request)

        owner_user = self._resolve_owner_user(email, principal_id, WRITE_DENIED)
        anchor = self._anchor_for(owner_user)

        if self.kind.owner_has_many:
            if not isinstance(sanitized, list):
                raise ParseError("Data must be an array of updates")
            return self.serialize(self._apply_many(anchor, owner_user, sanitized, item_ids, request), request, many=True)

        target = self._find_singleton(anchor)
        if target is None:
            target = self._create(anchor, {})
        return self.serialize(self._apply(target, sanitized, request), request)

    def _apply_many(self, anchor, owner_user, items: list, item_ids: list, request) -> list:
        results = []
        for item, item_id in zip(items, item_ids):
            if item_id is None:
                results.append(self._create(anchor, item))
                continue
            existing = self._fetch(item_id)
            if existing is None:
                raise NotFound(f"Record with id {item_id} not found")
            if owner_of(existing, self.kind) != owner_user.pk:
                raise PermissionDenied(f"You do not own the record with id {item_id}")
            results.append(self._apply(existing, item, request))
        return results

    def delete(self, request, raw_id):
        if not self.kind.owner_has_many:
            raise MethodNotAllowed(request.method)

        principal_id = resolve_principal_id(request)
        email = parse_indirect_identifier(raw_id, self.lookup_key)

        if email is None:
            existing = self._fetch(raw_id)
            if existing is None:
                raise NotFound(f"Record with id {raw_id} not found")
            if owner_of(existing, self.kind) != principal_id:
                raise PermissionDenied(WRITE_DENIED)
            deleted = self.serialize(existing, request)
            existing.delete()
            logger.info("deleted %s id=%s", self.kind.name, deleted["id"])
            return deleted

        owner_user = self._resolve_owner_user(email, principal_id, WRITE_DENIED)
        self._anchor_for(owner_user)
        ids = self._delete_ids(request.data)

        if getattr(settings, "ATOMIC_BULK_DELETE", True):
            with transaction.atomic():
                return self._bulk_delete(ids, owner_user, request, lock=True)
        return self._bulk_delete(ids, owner_user, request, lock=False)

    def _delete_ids(self, body) -> list:
        payload = body.get("data") if isinstance(body, Mapping) else None
        if not isinstance(payload, list):
            raise ParseError("Data must be an array of ids")
        self._check_bulk_size(payload)
        ids = []
        for entry in payload:
            value = entry.get("id") if isinstance(entry, Mapping) else entry
            if value is None or value == "" or isinstance(value, (bool, list, Mapping)):
                raise ParseError("Data must be an array of ids")
            ids.append(value)
        return ids

    def _bulk_delete(self, ids: list, owner_user, request, *, lock: bool) -> list:
        # Phase 1: every target must exist and belong to the owner.
        targets, seen = [], set()
        for item_id in ids:
            record = self._fetch(item_id, lock=lock)
            if record is None:
                raise NotFound(f"Record with id {item_id} not found")
            if owner_of(record, self.kind) != owner_user.pk:
                raise PermissionDenied(f"You do not own the record with id {item_id}")
            if record.pk not in seen:
                seen.add(record.pk)
                targets.append(record)

        # Phase 2: all checks passed.
        deleted = self.serialize(targets, request, many=True)
        for record in targets:
            record.delete()
        logger.info(
            "bulk deleted %s ids=%s for user id=%s",
            self.kind.name, [r["id"] for r in deleted], owner_user.pk,
        )
        return deleted
