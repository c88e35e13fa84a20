import unittest
from unittest import TestCase

from solders_codegen.utils import is_identifier, pascal_to_snake_case, rename_variant, snake_to_pascal_case


class TestCaseConversion(TestCase):
    def test_snake_to_pascal_case(self):
        self.assertEqual(snake_to_pascal_case("first_name"), "FirstName")
        self.assertEqual(snake_to_pascal_case("FIRST_NAME"), "FirstName")
        self.assertEqual(snake_to_pascal_case("actionTemplate"), "ActionTemplate")
        self.assertEqual(snake_to_pascal_case("json-parsed"), "JsonParsed")
        self.assertEqual(snake_to_pascal_case(""), "")

    def test_pascal_to_snake_case(self):
        self.assertEqual(pascal_to_snake_case("JsonParsed"), "json_parsed")
        self.assertEqual(pascal_to_snake_case("Base58"), "base58")
        self.assertEqual(pascal_to_snake_case("Base64Zstd"), "base64_zstd")
        self.assertEqual(pascal_to_snake_case("already_snake"), "already_snake")
        self.assertEqual(pascal_to_snake_case(""), "")


class TestVariantNames(TestCase):
    def test_rename_variant(self):
        self.assertEqual(rename_variant("Finalized", "lower"), "finalized")
        self.assertEqual(rename_variant("Finalized", "upper"), "FINALIZED")
        self.assertEqual(rename_variant("JsonParsed", "snake"), "json_parsed")
        self.assertEqual(rename_variant("json_parsed", "pascal"), "JsonParsed")

    def test_is_identifier(self):
        self.assertTrue(is_identifier("processed"))
        self.assertFalse(is_identifier("base64+zstd"))
        self.assertFalse(is_identifier("class"))
        self.assertFalse(is_identifier("1st"))


if __name__ == "__main__":
    unittest.main()
