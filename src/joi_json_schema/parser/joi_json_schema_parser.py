"""Entry point that turns a describable Joi schema into a JSON Schema document."""

import json

from typing import Any, Callable, Mapping, Optional, Protocol

from joi_json_schema.schema_converter import (
    JoiJsonSchemaError,
    JSONSchemaNode,
    convert_schema,
)


# Boolean exclusiveMinimum/exclusiveMaximum are only valid in draft-04.
JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-04/schema#"


class InvalidSchemaObject(JoiJsonSchemaError):
    """Raised when a candidate cannot describe itself as a Joi schema."""


class DescribableSchema(Protocol):
    def describe(self) -> Mapping[str, Any]: ...


class _StaticDescription:
    def __init__(self, description: Mapping[str, Any]):
        self._description = description

    def describe(self) -> Mapping[str, Any]:
        return self._description


def _get_joi_version(joi_obj: Any) -> Optional[str]:
    for holder in (getattr(joi_obj, "_currentJoi", None), joi_obj):
        version = getattr(holder, "version", None)
        if isinstance(version, str):
            return version
    return None


class JoiJsonSchemaParser:
    """Describe a Joi schema once and keep the JSON Schema built from it.

    Attributes:
        joi_obj: The schema object that was described.
        joi_version: Version reported by the Joi builder, or ``None``.
        joi_describe: The description tree returned by ``describe()``.
        json_schema: The converted JSON Schema document.
    """

    def __init__(
        self,
        joi_obj: DescribableSchema,
        *,
        strict: bool = False,
        max_depth: Optional[int] = None,
        warning_callback: Optional[Callable[[str], None]] = None,
        with_schema_uri: bool = False,
    ):
        describe = getattr(joi_obj, "describe", None)
        if not callable(describe):
            raise InvalidSchemaObject("Not a Joi object to be described.")

        self.joi_version = _get_joi_version(joi_obj)
        self.joi_obj = joi_obj
        self.joi_describe = describe()
        if not isinstance(self.joi_describe, Mapping):
            raise InvalidSchemaObject(
                "describe() returned "
                f"{type(self.joi_describe).__name__}, expected a mapping."
            )

        json_schema = convert_schema(
            self.joi_describe,
            strict=strict,
            max_depth=max_depth,
            warning_callback=warning_callback,
        )
        if with_schema_uri:
            json_schema = {"$schema": JSON_SCHEMA_DRAFT, **json_schema}
        self.json_schema: JSONSchemaNode = json_schema

    @classmethod
    def from_description(
        cls, description: Mapping[str, Any], **kwargs: Any
    ) -> "JoiJsonSchemaParser":
        """Build a parser from an already extracted description tree.

        Useful when ``describe()`` output was produced elsewhere, for example
        dumped to JSON by a Node.js process.
        """
        return cls(_StaticDescription(description), **kwargs)

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.json_schema, indent=indent)
