"""
Permission classes used across the API.

- `IsOwner`: object-level guard that allows access only when the principal reached
  through the view's `owner_path` (default `"user"`) is the caller.

Usage
-----
    permission_classes = [IsAuthenticated, IsOwner]
    owner_path = "profile.user"

The object must have the relations on that path loaded (`select_related`), because
ownership is read from the row without issuing queries. An unresolvable owner is a
denial.
"""

from rest_framework.permissions import BasePermission

from core.utils.paths import MISSING, get_path, identity_of


class IsOwner(BasePermission):
    """Object-level permission: only the owning principal can access/mutate."""

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        owner_id = identity_of(get_path(obj, getattr(view, "owner_path", "user")))
        return owner_id is not MISSING and owner_id == user.id
