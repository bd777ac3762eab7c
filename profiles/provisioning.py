"""
Profile provisioning: every user gets exactly one anchor `Profile`, lazily.

`ensure_profile()` looks the profile up and creates a published one when the user
has none. The one-to-one column makes a concurrent second insert fail, and
`get_or_create` then re-reads the row the other request created, so callers always
end up with the single profile.
"""

from __future__ import annotations

import logging

from core.models import RecordStatus

from .models import Profile

logger = logging.getLogger(__name__)


def ensure_profile(user, id_only: bool = False):
    """
    Return the user's profile (or just its id), creating it when absent.

    Raises:
        ValueError: when `user` has no id.
    """
    if user is None or getattr(user, "pk", None) is None:
        raise ValueError("ensure_profile: user with id is required")

    profile, created = Profile.objects.get_or_create(
        user_id=user.pk,
        defaults={"status": RecordStatus.PUBLISHED},
    )
    if created:
        logger.info("created profile id=%s for user id=%s", profile.pk, user.pk)
    return profile.pk if id_only else profile


def ensure_profile_id(user) -> int:
    return ensure_profile(user, id_only=True)
