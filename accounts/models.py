"""Custom user model for Profile Records.

The user is the *principal* of the owned-record API: every profile, person,
identity document and emergency contact ultimately resolves back to one `User`.

Behavior
--------
- Django's `AbstractUser` authentication behavior is kept as-is.
- `email` is unique. Indirection identifiers (`user=<email>`) look users up
  case-insensitively, see `User.objects.by_email()`.
"""

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class PrincipalManager(UserManager):
    def by_email(self, email: str):
        """Case-insensitive lookup; returns the user or None."""
        if not email:
            return None
        return self.filter(email__iexact=email.strip()).order_by("pk").first()


class User(AbstractUser):
    """Project's custom user model (the authenticated principal)."""

    email = models.EmailField("email address", unique=True)

    objects = PrincipalManager()
