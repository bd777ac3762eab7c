"""
Authentication glue and the authenticated principal extractor.

- `SessionAuthentication`: DRF session auth that advertises a challenge, so DRF
  answers anonymous calls with 401 instead of 403.
- `resolve_principal_id(request)`: returns the caller's user id or raises
  `NotAuthenticated`. It does not verify credentials itself; upstream
  authentication has already populated `request.user`.
"""

from __future__ import annotations

from rest_framework import authentication
from rest_framework.exceptions import NotAuthenticated


class SessionAuthentication(authentication.SessionAuthentication):
    """Session auth with a `WWW-Authenticate` challenge (401 on anonymous access)."""

    def authenticate_header(self, request) -> str:
        return 'Session realm="api"'


def resolve_principal_id(request) -> int:
    """
    Pull the authenticated principal id out of the request. Fails closed.

    Raises:
        NotAuthenticated: when no authenticated user with an id is attached.
    """
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated("Unauthorized")
    principal_id = getattr(user, "id", None)
    if principal_id is None:
        raise NotAuthenticated("Unauthorized")
    return principal_id
