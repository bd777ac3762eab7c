"""
Singleton record API tests (person, identity document).

What these tests verify
-----------------------
- **Isolation**: lists hold only the caller's rows; direct ids of someone
  else's record answer 403 on read and write.
- **Indirection**: `user=<email>` addresses the caller's own record; unknown
  emails answer 404, other users' emails 403. Email case does not matter.
- **Create-if-missing**: an indirect update creates the singleton once and
  updates it afterwards; reads before that return `{"data": null}`.
- **Partial updates**: omitted fields keep their values; owner columns in the
  payload are ignored.
- **Capabilities**: DELETE is not offered for singleton kinds (405).
"""

from __future__ import annotations

import datetime

from django.contrib.auth import get_user_model
from django.test import override_settings
from rest_framework.test import APIClient

from profiles.controller import READ_DENIED, WRITE_DENIED
from profiles.models import IdentityDocument, Person, Profile

from .utils import OwnedRecordAPITestCase

BASE = "/api/persons/"


class PersonIndirectionTests(OwnedRecordAPITestCase):
    def test_read_before_create_returns_null(self):
        r = self.client.get(self.by_email(BASE, "alice@example.com"))
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data, {"data": None})

    def test_read_provisions_missing_profile(self):
        carol = get_user_model().objects.create_user(username="carol", email="carol@example.com", password="pw")
        client = APIClient()
        client.force_authenticate(carol)
        r = client.get(self.by_email(BASE, "carol@example.com"))
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(Profile.objects.filter(user=carol).count(), 1)

    def test_update_creates_once_then_updates(self):
        url = self.by_email(BASE, "alice@example.com")
        r1 = self.client.put(url, {"data": {"first_name": "Alice"}}, format="json")
        self.assertEqual(r1.status_code, 200, r1.content)
        self.assertEqual(r1.data["data"]["first_name"], "Alice")
        self.assertEqual(r1.data["data"]["profile"], self.alice_profile.pk)
        self.assertEqual(r1.data["data"]["status"], "published")

        r2 = self.client.patch(url, {"data": {"last_name": "Liddell"}}, format="json")
        self.assertEqual(r2.status_code, 200, r2.content)
        self.assertEqual(r2.data["data"]["id"], r1.data["data"]["id"])
        self.assertEqual(r2.data["data"]["first_name"], "Alice")
        self.assertEqual(r2.data["data"]["last_name"], "Liddell")
        self.assertEqual(Person.objects.filter(profile=self.alice_profile).count(), 1)

        r3 = self.client.get(url)
        self.assertEqual(r3.data["data"], r2.data["data"])

    def test_email_is_case_insensitive(self):
        person = Person.objects.create(profile=self.alice_profile, first_name="Alice")
        r = self.client.get(self.by_email(BASE, "ALICE@Example.COM"))
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["id"], person.pk)

    def test_percent_encoded_email(self):
        person = Person.objects.create(profile=self.alice_profile)
        r = self.client.get(f"{BASE}user=alice%40example.com/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["id"], person.pk)

    def test_unknown_email_is_404(self):
        r = self.client.get(self.by_email(BASE, "nobody@example.com"))
        self.assertEqual(r.status_code, 404, r.content)
        self.assertIn("nobody@example.com", str(r.data["detail"]))

    def test_other_users_email_is_403(self):
        Person.objects.create(profile=self.bob_profile, first_name="Bob")
        r = self.client.get(self.by_email(BASE, "bob@example.com"))
        self.assertEqual(r.status_code, 403, r.content)
        self.assertEqual(str(r.data["detail"]), READ_DENIED)

        r = self.client.put(self.by_email(BASE, "bob@example.com"), {"data": {"first_name": "X"}}, format="json")
        self.assertEqual(r.status_code, 403, r.content)
        self.assertEqual(str(r.data["detail"]), WRITE_DENIED)
        self.assertEqual(Person.objects.get(profile=self.bob_profile).first_name, "Bob")


class PersonDirectIdTests(OwnedRecordAPITestCase):
    def setUp(self):
        super().setUp()
        self.mine = Person.objects.create(profile=self.alice_profile, first_name="Alice", nationality="UK")
        self.theirs = Person.objects.create(profile=self.bob_profile, first_name="Bob", nationality="FR")

    def test_get_own_by_id_and_document_id(self):
        r = self.client.get(f"{BASE}{self.mine.pk}/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["first_name"], "Alice")

        r = self.client.get(f"{BASE}{self.mine.document_id}/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["id"], self.mine.pk)

    def test_email_route_matches_direct_id_route(self):
        by_id = self.client.get(f"{BASE}{self.mine.pk}/")
        by_email = self.client.get(self.by_email(BASE, "alice@example.com"))
        self.assertEqual(by_id.status_code, 200, by_id.content)
        self.assertEqual(by_email.status_code, 200, by_email.content)
        self.assertEqual(by_id.data, by_email.data)
        self.assertEqual(by_email.data["data"]["id"], self.mine.pk)

    def test_get_missing_returns_null(self):
        r = self.client.get(f"{BASE}999999/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertIsNone(r.data["data"])
        r = self.client.get(f"{BASE}not-an-id/")
        self.assertIsNone(r.data["data"])

    def test_get_other_users_record_is_403(self):
        r = self.client.get(f"{BASE}{self.theirs.pk}/")
        self.assertEqual(r.status_code, 403, r.content)
        self.assertEqual(str(r.data["detail"]), READ_DENIED)

    def test_update_other_users_record_is_403(self):
        r = self.client.patch(f"{BASE}{self.theirs.pk}/", {"data": {"first_name": "Hacked"}}, format="json")
        self.assertEqual(r.status_code, 403, r.content)
        self.assertEqual(str(r.data["detail"]), WRITE_DENIED)
        self.theirs.refresh_from_db()
        self.assertEqual(self.theirs.first_name, "Bob")

    def test_update_missing_returns_null(self):
        r = self.client.put(f"{BASE}999999/", {"data": {"first_name": "X"}}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertIsNone(r.data["data"])

    def test_partial_update_keeps_other_fields(self):
        r = self.client.patch(f"{BASE}{self.mine.pk}/", {"data": {"phone": "+44 1"}}, format="json")
        self.assertEqual(r.status_code, 200, r.content)
        self.mine.refresh_from_db()
        self.assertEqual(self.mine.phone, "+44 1")
        self.assertEqual(self.mine.first_name, "Alice")
        self.assertEqual(self.mine.nationality, "UK")

    def test_owner_field_in_payload_is_ignored(self):
        r = self.client.put(
            f"{BASE}{self.mine.pk}/",
            {"data": {"profile": self.bob_profile.pk, "first_name": "Still Alice"}},
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)
        self.mine.refresh_from_db()
        self.assertEqual(self.mine.profile_id, self.alice_profile.pk)
        self.assertEqual(self.mine.first_name, "Still Alice")

    def test_server_managed_fields_are_ignored(self):
        original = self.mine.document_id
        r = self.client.patch(
            f"{BASE}{self.mine.pk}/",
            {"data": {"document_id": "00000000-0000-0000-0000-000000000000", "status": "draft"}},
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)
        self.mine.refresh_from_db()
        self.assertEqual(self.mine.document_id, original)
        self.assertEqual(self.mine.status, "published")

    def test_missing_or_malformed_payload_is_400(self):
        url = f"{BASE}{self.mine.pk}/"
        for body in ({}, {"data": None}, {"data": "text"}, {"first_name": "X"}):
            with self.subTest(body=body):
                r = self.client.put(url, body, format="json")
                self.assertEqual(r.status_code, 400, r.content)

    def test_array_payload_for_singleton_is_400(self):
        r = self.client.put(f"{BASE}{self.mine.pk}/", {"data": [{"first_name": "X"}]}, format="json")
        self.assertEqual(r.status_code, 400, r.content)

    def test_invalid_choice_is_400(self):
        r = self.client.patch(f"{BASE}{self.mine.pk}/", {"data": {"gender": "robot"}}, format="json")
        self.assertEqual(r.status_code, 400, r.content)
        self.assertIn("gender", r.data)

    def test_delete_is_not_offered(self):
        r = self.client.delete(f"{BASE}{self.mine.pk}/")
        self.assertEqual(r.status_code, 405, r.content)
        self.assertTrue(Person.objects.filter(pk=self.mine.pk).exists())


class PersonListTests(OwnedRecordAPITestCase):
    def setUp(self):
        super().setUp()
        Person.objects.create(profile=self.alice_profile, first_name="Alice", nationality="UK")
        Person.objects.create(profile=self.bob_profile, first_name="Bob", nationality="UK")

    def test_list_holds_only_callers_records(self):
        r = self.client.get(BASE)
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual([p["first_name"] for p in r.data["data"]], ["Alice"])
        self.assertEqual(r.data["meta"]["pagination"]["total"], 1)
        self.assertEqual(r.data["meta"]["pagination"]["page"], 1)

    def test_caller_filters_cannot_widen_scope(self):
        r = self.client.get(BASE, {"nationality": "UK"})
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(len(r.data["data"]), 1)

        r = self.client.get(BASE, {"first_name": "Bob"})
        self.assertEqual(r.data["data"], [])

    def test_unauthenticated_is_401(self):
        client = APIClient()
        for method, url in (("get", BASE), ("get", f"{BASE}1/"), ("put", f"{BASE}1/")):
            with self.subTest(method=method, url=url):
                r = getattr(client, method)(url)
                self.assertEqual(r.status_code, 401, r.content)


class IdentityDocumentAPITests(OwnedRecordAPITestCase):
    url = "/api/identity-documents/"

    def test_indirect_update_creates_document(self):
        r = self.client.put(
            self.by_email(self.url, "alice@example.com"),
            {"data": {"document_type": "passport", "document_number": "X123", "issued_on": "2020-01-01"}},
            format="json",
        )
        self.assertEqual(r.status_code, 200, r.content)
        doc = IdentityDocument.objects.get(profile=self.alice_profile)
        self.assertEqual(doc.document_number, "X123")
        self.assertEqual(doc.issued_on, datetime.date(2020, 1, 1))

    def test_expiry_before_issue_is_400(self):
        doc = IdentityDocument.objects.create(profile=self.alice_profile, issued_on=datetime.date(2020, 1, 1))
        r = self.client.patch(
            f"{self.url}{doc.pk}/",
            {"data": {"issued_on": "2020-01-01", "expires_on": "2019-01-01"}},
            format="json",
        )
        self.assertEqual(r.status_code, 400, r.content)
        self.assertIn("expires_on", r.data)

    def test_filter_by_document_type(self):
        IdentityDocument.objects.create(profile=self.alice_profile, document_type="passport")
        r = self.client.get(self.url, {"document_type": "national_id"})
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"], [])

    @override_settings(OWNER_LOOKUP_KEY="owner")
    def test_lookup_key_is_configurable(self):
        IdentityDocument.objects.create(profile=self.alice_profile, document_number="Z9")
        r = self.client.get(f"{self.url}owner=alice@example.com/")
        self.assertEqual(r.status_code, 200, r.content)
        self.assertEqual(r.data["data"]["document_number"], "Z9")
