"""
Profile endpoint tests.

- `/api/profiles/me/` provisions the caller's profile on first access and is
  idempotent afterwards.
- Listing and retrieval are scoped to the caller; profiles cannot be written
  or deleted through the API.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient, APITestCase

from profiles.models import Profile


class ProfileAPITests(APITestCase):
    def setUp(self):
        cache.clear()
        User = get_user_model()
        self.alice = User.objects.create_user(username="alice", email="alice@example.com", password="pw")
        self.bob = User.objects.create_user(username="bob", email="bob@example.com", password="pw")
        self.client = APIClient()
        self.client.force_authenticate(self.alice)

    def test_me_provisions_once(self):
        self.assertFalse(Profile.objects.filter(user=self.alice).exists())
        r1 = self.client.get("/api/profiles/me/")
        self.assertEqual(r1.status_code, 200, r1.content)
        r2 = self.client.get("/api/profiles/me/")
        self.assertEqual(r1.data["data"]["id"], r2.data["data"]["id"])
        self.assertEqual(r1.data["data"]["email"], "alice@example.com")
        self.assertEqual(Profile.objects.filter(user=self.alice).count(), 1)

    def test_list_and_retrieve_are_scoped(self):
        mine = Profile.objects.create(user=self.alice)
        theirs = Profile.objects.create(user=self.bob)

        r = self.client.get("/api/profiles/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual([p["id"] for p in r.data["data"]], [mine.pk])

        r = self.client.get(f"/api/profiles/{mine.pk}/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["user"], self.alice.pk)

        r = self.client.get(f"/api/profiles/{theirs.pk}/")
        self.assertEqual(r.status_code, 404, r.content)

    def test_profiles_are_read_only(self):
        mine = Profile.objects.create(user=self.alice)
        self.assertEqual(self.client.put(f"/api/profiles/{mine.pk}/", {}, format="json").status_code, 405)
        self.assertEqual(self.client.delete(f"/api/profiles/{mine.pk}/").status_code, 405)
        self.assertTrue(Profile.objects.filter(pk=mine.pk).exists())

    def test_unauthenticated_is_401(self):
        r = APIClient().get("/api/profiles/me/")
        self.assertEqual(r.status_code, 401, r.content)
        self.assertIn("WWW-Authenticate", r.headers)
