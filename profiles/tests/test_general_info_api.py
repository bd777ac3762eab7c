"""General info is anchored on the user directly; no profile hop is involved."""

from __future__ import annotations

from profiles.models import GeneralInfo

from .utils import OwnedRecordAPITestCase

BASE = "/api/general-infos/"


class GeneralInfoAPITests(OwnedRecordAPITestCase):
    def test_indirect_update_creates_user_anchored_record(self):
        r = self.client.put(
            self.by_email(BASE, "alice@example.com"),
            {"data": {"preferred_language": "en", "time_zone": "Europe/London", "user": self.bob.pk}},
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)
        info = GeneralInfo.objects.get()
        self.assertEqual(info.user_id, self.alice.pk)
        self.assertEqual(r.data["data"]["user"], self.alice.pk)
        self.assertEqual(info.time_zone, "Europe/London")

    def test_direct_update_checks_owner(self):
        theirs = GeneralInfo.objects.create(user=self.bob, bio="hello")
        r = self.client.patch(f"{BASE}{theirs.pk}/", {"data": {"bio": "changed"}}, format="json")
        self.assertEqual(r.status_code, 403, r.content)

        mine = GeneralInfo.objects.create(user=self.alice)
        r = self.client.patch(f"{BASE}{mine.pk}/", {"data": {"bio": "changed"}}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["bio"], "changed")

    def test_list_is_scoped(self):
        GeneralInfo.objects.create(user=self.alice, preferred_language="en")
        GeneralInfo.objects.create(user=self.bob, preferred_language="fr")
        r = self.client.get(BASE)
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual([i["preferred_language"] for i in r.data["data"]], ["en"])

    def test_undeclared_actions_are_405(self):
        info = GeneralInfo.objects.create(user=self.alice)
        self.assertEqual(self.client.get(f"{BASE}{info.pk}/").status_code, 405)
        self.assertEqual(self.client.delete(f"{BASE}{info.pk}/").status_code, 405)
        self.assertTrue(GeneralInfo.objects.filter(pk=info.pk).exists())
