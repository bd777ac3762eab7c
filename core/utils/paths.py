from __future__ import annotations

"""
Dotted-path access over record graphs.

A record graph is either a mapping (request payloads, serialized rows) or a Django
model instance whose relations may or may not have been fetched. `get_path()` walks
both and returns the `MISSING` marker as soon as a segment is absent or None, so
callers test `is MISSING` instead of juggling falsy values.

Model instances
---------------
- Walking never triggers a query. A forward relation (FK / one-to-one) that was not
  loaded with `select_related` yields its bare key value (e.g. `profile_id`),
  exactly like an unpopulated relation in a serialized payload.
- A reverse one-to-one that was not loaded yields `MISSING`; reverse/many relations
  yield a list only when prefetched.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from django.core.exceptions import FieldDoesNotExist
from django.db import models


class _Missing:
    """Singleton marker for "no value at this path"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    return [part for part in path.split(".") if part]


def _model_segment(obj: models.Model, name: str) -> Any:
    try:
        field = obj._meta.get_field(name)
    except FieldDoesNotExist:
        return getattr(obj, name, MISSING)

    if not field.is_relation:
        return getattr(obj, field.attname, MISSING)

    if field.concrete and (field.many_to_one or field.one_to_one):
        if field.is_cached(obj):
            return getattr(obj, name)
        return getattr(obj, field.attname)

    if field.one_to_one:
        # Reverse one-to-one: only available when it was loaded with the row.
        return getattr(obj, field.get_accessor_name()) if field.is_cached(obj) else MISSING

    accessor = field.get_accessor_name() if hasattr(field, "get_accessor_name") else name
    prefetched = getattr(obj, "_prefetched_objects_cache", {})
    for key in (accessor, name):
        if key in prefetched:
            return list(prefetched[key])
    return MISSING


def _segment(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, MISSING)
    if isinstance(value, models.Model):
        return _model_segment(value, name)
    return MISSING


def get_path(record: Any, path: str) -> Any:
    """
    Return the value at dotted `path` inside `record`, or `MISSING`.

    `None` at any step (including the final one) counts as missing.
    """
    value = record
    for name in split_path(path):
        if value is None or value is MISSING:
            return MISSING
        value = _segment(value, name)
    if value is None:
        return MISSING
    return value


def delete_path(record: Any, path: str) -> bool:
    """
    Remove the key at dotted `path` from a nested mapping.

    Returns True when something was removed. Non-mapping parents are left alone.
    """
    parts = split_path(path)
    if not parts:
        return False
    parent = get_path(record, ".".join(parts[:-1])) if len(parts) > 1 else record
    if isinstance(parent, MutableMapping) and parts[-1] in parent:
        del parent[parts[-1]]
        return True
    return False


def identity_of(value: Any) -> Any:
    """
    Unwrap a relation value to its identifier.

    Model instances give their pk, mappings their `id`, anything else is already a
    bare identifier.
    """
    if value is None or value is MISSING:
        return MISSING
    if isinstance(value, models.Model):
        return value.pk if value.pk is not None else MISSING
    if isinstance(value, Mapping):
        return get_path(value, "id")
    return value
