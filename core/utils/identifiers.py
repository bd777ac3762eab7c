"""
Route identifier parsing for owned-record endpoints.

Grammar
-------
- `<key>=<percent-encoded value>` (key matched case-insensitively) is an
  indirection identifier: the value is looked up rather than used as a key.
- Anything else is a direct record identifier: an integer primary key or a
  `document_id` UUID.
"""

from __future__ import annotations

import re
import uuid
from functools import lru_cache
from urllib.parse import unquote


@lru_cache(maxsize=16)
def _indirection_pattern(key: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(key)}=(.+)$", re.IGNORECASE | re.DOTALL)


def parse_indirect_identifier(raw_id, key: str = "user") -> str | None:
    """
    Extract the value of a `<key>=<value>` identifier.

    Returns the percent-decoded, trimmed value, or None when `raw_id` is not an
    indirection (the caller then treats it as a direct identifier). Malformed
    percent-encoding falls back to the raw captured text.
    """
    if not raw_id or not isinstance(raw_id, str):
        return None
    match = _indirection_pattern(key).match(raw_id)
    if not match:
        return None
    captured = match.group(1)
    try:
        return unquote(captured, errors="strict").strip()
    except UnicodeDecodeError:
        return captured.strip()


def parse_record_ref(raw_id) -> dict | None:
    """
    Map a direct identifier to ORM lookup kwargs.

    - digits -> {"pk": int}
    - UUID   -> {"document_id": UUID}
    - otherwise None (no record can match)
    """
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return {"pk": raw_id} if raw_id > 0 else None
    if not isinstance(raw_id, str):
        return None
    value = raw_id.strip()
    if value.isascii() and value.isdigit():
        return {"pk": int(value)}
    try:
        return {"document_id": uuid.UUID(value)}
    except ValueError:
        return None
