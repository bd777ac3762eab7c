"""Shared setup for the profile record API tests."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient, APITestCase

from profiles.provisioning import ensure_profile


class OwnedRecordAPITestCase(APITestCase):
    """Two users, `alice` (the caller) and `bob`, each with a profile."""

    def setUp(self):
        # Throttle counters live in the cache and would leak between tests.
        cache.clear()
        User = get_user_model()
        self.alice = User.objects.create_user(username="alice", email="alice@example.com", password="pw")
        self.bob = User.objects.create_user(username="bob", email="bob@example.com", password="pw")
        self.alice_profile = ensure_profile(self.alice)
        self.bob_profile = ensure_profile(self.bob)
        self.client = APIClient()
        self.client.force_authenticate(self.alice)

    @staticmethod
    def by_email(base: str, email: str) -> str:
        return f"{base}user={email}/"
