import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from joi_json_schema.schema_converter import (
    SchemaDepthExceeded,
    conversion_options_from_env,
    convert_schema,
)


class ConversionOptionsFromEnvTests(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.dotenv_path = Path(self._tmpdir.name) / ".env"

    def tearDown(self):
        self._tmpdir.cleanup()

    def _write_dotenv(self, text: str) -> None:
        self.dotenv_path.write_text(text, encoding="utf-8")

    def test_reads_values_from_dotenv_file(self):
        self._write_dotenv("JOI_JSON_SCHEMA_STRICT=true\nJOI_JSON_SCHEMA_MAX_DEPTH=8\n")

        with patch.dict(os.environ, {}, clear=True):
            options = conversion_options_from_env(self.dotenv_path)

        self.assertEqual(options, {"strict": True, "max_depth": 8})

    def test_process_environment_overrides_dotenv(self):
        self._write_dotenv("JOI_JSON_SCHEMA_STRICT=yes\n")

        with patch.dict(os.environ, {"JOI_JSON_SCHEMA_STRICT": "0"}, clear=True):
            options = conversion_options_from_env(self.dotenv_path)

        self.assertEqual(options, {"strict": False})

    def test_unset_variables_are_left_out(self):
        self._write_dotenv("UNRELATED=1\n")

        with patch.dict(os.environ, {}, clear=True):
            options = conversion_options_from_env(self.dotenv_path)

        self.assertEqual(options, {})

    def test_invalid_values_raise_value_error(self):
        for env in (
            {"JOI_JSON_SCHEMA_STRICT": "maybe"},
            {"JOI_JSON_SCHEMA_MAX_DEPTH": "deep"},
            {"JOI_JSON_SCHEMA_MAX_DEPTH": "0"},
        ):
            with self.subTest(env=env):
                with patch.dict(os.environ, env, clear=True):
                    with self.assertRaises(ValueError):
                        conversion_options_from_env(self.dotenv_path)

    def test_options_feed_convert_schema(self):
        self._write_dotenv("JOI_JSON_SCHEMA_MAX_DEPTH=1\n")

        with patch.dict(os.environ, {}, clear=True):
            options = conversion_options_from_env(self.dotenv_path)

        nested = {"type": "array", "items": [{"type": "array", "items": []}]}
        with self.assertRaises(SchemaDepthExceeded):
            convert_schema({"type": "array", "items": [nested]}, **options)


if __name__ == "__main__":
    unittest.main()
