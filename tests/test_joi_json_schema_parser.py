import json
import sys
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from joi_json_schema.parser import (
    JSON_SCHEMA_DRAFT,
    InvalidSchemaObject,
    JoiJsonSchemaParser,
)
from joi_json_schema.schema_converter import JoiJsonSchemaError, UnknownRuleError


USER_DESCRIPTION = {
    "type": "object",
    "flags": {"allowUnknown": False},
    "children": {
        "username": {
            "type": "string",
            "flags": {"presence": "required"},
            "rules": [{"name": "min", "arg": 3}, {"name": "max", "arg": 30}],
        },
        "email": {"type": "string", "rules": [{"name": "email", "arg": {}}]},
    },
}


class _FakeJoi:
    version = "15.1.1"


class _FakeSchema:
    def __init__(self, description):
        self._description = description
        self._currentJoi = _FakeJoi()
        self.describe_calls = 0

    def describe(self):
        self.describe_calls += 1
        return self._description


class JoiJsonSchemaParserTests(unittest.TestCase):
    def test_converts_described_schema(self):
        """Shows the parser describing once and storing the converted document."""
        joi_obj = _FakeSchema(USER_DESCRIPTION)

        parser = JoiJsonSchemaParser(joi_obj)

        self.assertEqual(joi_obj.describe_calls, 1)
        self.assertIs(parser.joi_obj, joi_obj)
        self.assertEqual(parser.joi_describe, USER_DESCRIPTION)
        self.assertEqual(parser.joi_version, "15.1.1")
        self.assertEqual(
            parser.json_schema,
            {
                "type": "object",
                "additionalProperties": False,
                "required": ["username"],
                "properties": {
                    "username": {"type": "string", "minLength": 3, "maxLength": 30},
                    "email": {"type": "string", "format": "email"},
                },
            },
        )

    def test_rejects_object_without_describe(self):
        for candidate in (None, {"type": "string"}, object(), "joi"):
            with self.subTest(candidate=candidate):
                with self.assertRaises(InvalidSchemaObject):
                    JoiJsonSchemaParser(candidate)

    def test_rejects_non_callable_describe(self):
        class NotDescribable:
            describe = {"type": "string"}

        with self.assertRaises(InvalidSchemaObject):
            JoiJsonSchemaParser(NotDescribable())

    def test_rejects_describe_returning_non_mapping(self):
        with self.assertRaises(InvalidSchemaObject):
            JoiJsonSchemaParser(_FakeSchema(["not", "a", "description"]))

    def test_invalid_schema_object_is_a_package_error(self):
        self.assertTrue(issubclass(InvalidSchemaObject, JoiJsonSchemaError))

    def test_version_falls_back_to_own_attribute(self):
        class Describable:
            version = "17.0.0"

            def describe(self):
                return {"type": "boolean"}

        parser = JoiJsonSchemaParser(Describable())

        self.assertEqual(parser.joi_version, "17.0.0")
        self.assertEqual(parser.json_schema, {"type": "boolean"})

    def test_from_description_has_no_version(self):
        parser = JoiJsonSchemaParser.from_description({"type": "date"})

        self.assertIsNone(parser.joi_version)
        self.assertEqual(parser.json_schema, {"type": "string", "format": "date-time"})

    def test_schema_uri_only_on_root(self):
        parser = JoiJsonSchemaParser.from_description(
            USER_DESCRIPTION, with_schema_uri=True
        )

        self.assertEqual(parser.json_schema["$schema"], JSON_SCHEMA_DRAFT)
        self.assertNotIn("$schema", parser.json_schema["properties"]["email"])

    def test_options_are_forwarded(self):
        warnings: list[str] = []
        description = {"type": "string", "rules": [{"name": "lowercase"}]}

        JoiJsonSchemaParser.from_description(
            description, warning_callback=warnings.append
        )
        self.assertEqual(len(warnings), 1)

        with self.assertRaises(UnknownRuleError):
            JoiJsonSchemaParser.from_description(description, strict=True)

    def test_to_json_round_trips(self):
        parser = JoiJsonSchemaParser(_FakeSchema(USER_DESCRIPTION))

        self.assertEqual(json.loads(parser.to_json(indent=2)), parser.json_schema)


if __name__ == "__main__":
    unittest.main()
