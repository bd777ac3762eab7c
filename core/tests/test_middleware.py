"""
Request middleware tests (request id header, access log line, body size cap).

Notes
-----
- `self.assertLogs("records.request")` captures the dedicated channel, so the
  test does not depend on the global LOGGING configuration.
- `/health/` is used as the target so no authentication is needed.
"""

from __future__ import annotations

from django.test import TestCase, override_settings
from rest_framework.test import APIClient


class RequestIDMiddlewareTests(TestCase):
    def test_response_includes_request_id_and_logs_once(self):
        with self.assertLogs("records.request", level="INFO") as cap:
            r = self.client.get("/health/")
        self.assertEqual(r.status_code, 200)
        self.assertRegex(r.headers.get("X-Request-ID") or "", r"^[A-Za-z0-9._\-]{1,200}$")
        self.assertEqual(len(cap.records), 1)
        record = cap.records[0]
        self.assertEqual(record.method, "GET")
        self.assertEqual(record.path, "/health/")
        self.assertEqual(record.status, 200)

    def test_client_provided_request_id_is_respected(self):
        r = self.client.get("/health/", HTTP_X_REQUEST_ID="custom-123_OK")
        self.assertEqual(r.headers.get("X-Request-ID"), "custom-123_OK")

    def test_bad_client_request_id_is_replaced(self):
        r = self.client.get("/health/", HTTP_X_REQUEST_ID="BAD ID")
        self.assertNotEqual(r.headers.get("X-Request-ID"), "BAD ID")
        self.assertRegex(r.headers.get("X-Request-ID") or "", r"^[a-f0-9]{32}$")


class RequestSizeLimitTests(TestCase):
    @override_settings(MAX_REQUEST_BYTES=100)
    def test_oversized_body_is_rejected_with_413(self):
        client = APIClient()
        r = client.put(
            "/api/persons/user=alice@example.com/",
            {"data": {"first_name": "A" * 200}},
            format="json",
        )
        self.assertEqual(r.status_code, 413, r.content)
        self.assertEqual(r.json()["code"], "request_too_large")
