"""
Ownership resolution for owned records.

A record is owned by the user reached through its owner relation:

    record.<owner_field>            -> Profile  (profile-anchored kinds)
    record.<owner_field>.user       -> User     (the owning principal)

or, for principal-anchored kinds, `record.<owner_field>` is the user itself.

Nothing here performs I/O. Callers load the owner chain first
(`select_related("profile__user")`, see `OwnedKind.populate`); an unloaded hop
means ownership cannot be determined and the result is None, which never
matches a caller.
"""

from __future__ import annotations

from collections.abc import Mapping

from django.db import models

from core.utils.paths import MISSING, get_path, identity_of, split_path


def extract_owner_principal_id(record, owner_field: str, through: str | None = "user"):
    """
    Return the id of the user owning `record`, or None when it cannot be told.

    Args:
        record: model instance or mapping.
        owner_field: dotted path to the owner relation (e.g. "profile").
        through: relation from the owner to the user ("user"), or None when the
            owner relation already points at the user.
    """
    rel = get_path(record, owner_field)
    if rel is MISSING:
        return None

    if through is None:
        owner = identity_of(rel)
    elif isinstance(rel, (Mapping, models.Model)):
        owner = identity_of(get_path(rel, through))
    else:
        # Bare owner id: the owner was not loaded.
        return None

    return None if owner is MISSING else owner


def owner_of(record, kind):
    return extract_owner_principal_id(record, kind.owner_field, kind.principal_hop)


def owner_filter(principal_path: str, principal_id) -> dict:
    """ORM filter kwargs restricting rows to `principal_id` (e.g. `profile__user__id`)."""
    return {"__".join(split_path(principal_path) + ["id"]): principal_id}


def scope_to_principal(queryset, principal_path: str, principal_id):
    return queryset.filter(**owner_filter(principal_path, principal_id))
