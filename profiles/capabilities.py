"""
Capability grants for authenticated users.

Capabilities
------------
`find` (list), `findOne` (single fetch), `update`, `delete`. Each owned kind
declares the ones it exposes (`OwnedKind.actions`); viewsets answer 405 for the
others. The profile endpoints expose `find` and `findOne`.

Reconciliation
--------------
`sync_authenticated_permissions()` mirrors the declared capabilities onto the
`Authenticated` group as Django model permissions:
    find / findOne -> view_<model>
    update         -> add_<model>, change_<model>   (indirect update may create)
    delete         -> delete_<model>
Missing permissions are granted, permissions for the same models that are no longer
declared are revoked. It is idempotent and runs after every `migrate` (see
`profiles.signals`) and on demand via `manage.py sync_permissions`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import DEFAULT_DB_ALIAS, transaction

logger = logging.getLogger(__name__)

FIND = "find"
FIND_ONE = "findOne"
UPDATE = "update"
DELETE = "delete"

# DRF viewset action -> capability
ACTION_CAPABILITIES = {
    "list": FIND,
    "retrieve": FIND_ONE,
    "me": FIND_ONE,
    "update": UPDATE,
    "partial_update": UPDATE,
    "destroy": DELETE,
}

CAPABILITY_PERMISSIONS = {
    FIND: ("view",),
    FIND_ONE: ("view",),
    UPDATE: ("add", "change"),
    DELETE: ("delete",),
}

AUTHENTICATED_GROUP = "Authenticated"
PROFILE_CAPABILITIES = frozenset({FIND, FIND_ONE})


@dataclass
class SyncReport:
    granted: list[str] = field(default_factory=list)
    revoked: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.granted or self.revoked)


def required_grants() -> dict:
    """Model class -> declared capabilities, for the profile and every owned kind."""
    from .kinds import KINDS
    from .models import Profile

    grants = {Profile: PROFILE_CAPABILITIES}
    for kind in KINDS:
        grants[kind.model] = kind.actions
    return grants


def permission_codenames(model, capabilities) -> set[str]:
    name = model._meta.model_name
    return {f"{verb}_{name}" for cap in capabilities for verb in CAPABILITY_PERMISSIONS[cap]}


def sync_authenticated_permissions(using: str = DEFAULT_DB_ALIAS) -> SyncReport:
    """Grant declared capability permissions to the Authenticated group and prune stale ones."""
    from django.contrib.auth.models import Group, Permission
    from django.contrib.contenttypes.models import ContentType

    report = SyncReport()
    with transaction.atomic(using=using):
        group, created = Group.objects.using(using).get_or_create(name=AUTHENTICATED_GROUP)
        if created:
            logger.info("[permissions] created group %s", AUTHENTICATED_GROUP)

        for model, capabilities in required_grants().items():
            ct = ContentType.objects.db_manager(using).get_for_model(model)
            wanted = permission_codenames(model, capabilities)
            current = set(group.permissions.filter(content_type=ct).values_list("codename", flat=True))

            missing = Permission.objects.using(using).filter(content_type=ct, codename__in=wanted - current)
            for perm in missing:
                group.permissions.add(perm)
                report.granted.append(f"{ct.app_label}.{perm.codename}")
                logger.info("[permissions] granted %s.%s to %s", ct.app_label, perm.codename, AUTHENTICATED_GROUP)

            for perm in group.permissions.filter(content_type=ct).exclude(codename__in=wanted):
                group.permissions.remove(perm)
                report.revoked.append(f"{ct.app_label}.{perm.codename}")
                logger.info("[permissions] revoked %s.%s from %s (not declared)", ct.app_label, perm.codename, AUTHENTICATED_GROUP)

            unknown = wanted - set(
                Permission.objects.using(using).filter(content_type=ct).values_list("codename", flat=True)
            )
            if unknown:
                logger.warning("[permissions] no such permissions for %s: %s", ct.model, ", ".join(sorted(unknown)))

    return report
