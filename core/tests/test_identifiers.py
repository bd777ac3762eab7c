"""Route identifier parsing: `user=<email>` indirection and direct record refs."""

import uuid

from django.test import SimpleTestCase

from core.utils.identifiers import parse_indirect_identifier, parse_record_ref


class IndirectIdentifierTests(SimpleTestCase):
    def test_plain_and_percent_encoded(self):
        self.assertEqual(parse_indirect_identifier("user=alice@example.com"), "alice@example.com")
        self.assertEqual(parse_indirect_identifier("user=alice%40example.com"), "alice@example.com")

    def test_key_is_case_insensitive_and_value_trimmed(self):
        self.assertEqual(parse_indirect_identifier("USER=%20bob@example.com%20"), "bob@example.com")

    def test_direct_identifiers_are_not_indirections(self):
        self.assertIsNone(parse_indirect_identifier("42"))
        self.assertIsNone(parse_indirect_identifier("user="))
        self.assertIsNone(parse_indirect_identifier("owner=alice@example.com"))
        self.assertIsNone(parse_indirect_identifier(""))
        self.assertIsNone(parse_indirect_identifier(None))
        self.assertIsNone(parse_indirect_identifier(42))

    def test_custom_key(self):
        self.assertEqual(parse_indirect_identifier("owner=a@b.io", key="owner"), "a@b.io")
        self.assertIsNone(parse_indirect_identifier("user=a@b.io", key="owner"))

    def test_malformed_encoding_falls_back_to_raw_text(self):
        self.assertEqual(parse_indirect_identifier("user=%ff%fe"), "%ff%fe")


class RecordRefTests(SimpleTestCase):
    def test_integer_ids(self):
        self.assertEqual(parse_record_ref("42"), {"pk": 42})
        self.assertEqual(parse_record_ref(" 7 "), {"pk": 7})
        self.assertEqual(parse_record_ref(9), {"pk": 9})

    def test_document_uuid(self):
        value = uuid.uuid4()
        self.assertEqual(parse_record_ref(str(value)), {"document_id": value})

    def test_rejected_values(self):
        for raw in (True, False, 0, -3, None, "abc", "-1", "1.5", "٣", ["1"]):
            with self.subTest(raw=raw):
                self.assertIsNone(parse_record_ref(raw))
