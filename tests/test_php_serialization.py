from __future__ import annotations

import unittest

from apprentice_api.shared.php_serialization import is_serialized, maybe_unserialize, php_array_values


class PhpSerializationTests(unittest.TestCase):
    def test_detects_serialized_values(self):
        self.assertTrue(is_serialized('a:1:{i:0;i:5;}'))
        self.assertTrue(is_serialized("b:1;"))
        self.assertTrue(is_serialized("N;"))
        self.assertFalse(is_serialized("hello"))
        self.assertFalse(is_serialized(42))
        self.assertFalse(is_serialized(None))

    def test_unserializes_nested_arrays_with_text_keys(self):
        value = maybe_unserialize('a:2:{s:4:"name";s:5:"Intro";s:3:"ids";a:2:{i:0;i:11;i:1;i:12;}}')

        self.assertEqual(value, {"name": "Intro", "ids": {0: 11, 1: 12}})

    def test_plain_values_pass_through(self):
        self.assertEqual(maybe_unserialize("2024-01-01 00:00:00"), "2024-01-01 00:00:00")
        self.assertIsNone(maybe_unserialize(None))

    def test_broken_blob_decodes_to_none(self):
        self.assertIsNone(maybe_unserialize('a:2:{i:0;s:9:"short";}'))

    def test_php_array_values(self):
        self.assertEqual(php_array_values({0: "a", 1: "b"}), ["a", "b"])
        self.assertEqual(php_array_values(["a"]), ["a"])
        self.assertIsNone(php_array_values("a"))
