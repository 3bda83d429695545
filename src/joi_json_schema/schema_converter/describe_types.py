"""Typed shapes for Joi description trees and the JSON Schema they become."""

from typing import Any, NotRequired, TypeAlias, TypedDict


class JoiRule(TypedDict):
    name: str
    arg: NotRequired[Any]


class JoiFlags(TypedDict, total=False):
    presence: str
    default: Any
    encoding: str
    timestamp: str | bool
    allowUnknown: bool


class JoiMeta(TypedDict, total=False):
    contentMediaType: str


class JoiDescription(TypedDict):
    type: str
    rules: NotRequired[list[JoiRule]]
    flags: NotRequired[JoiFlags]
    valids: NotRequired[list[Any]]
    examples: NotRequired[list[Any]]
    description: NotRequired[str]
    meta: NotRequired[list[JoiMeta]]
    children: NotRequired[dict[str, "JoiDescription"]]
    items: NotRequired[list["JoiDescription"]]
    alternatives: NotRequired[list["JoiDescription"]]


JSONSchemaNode: TypeAlias = dict[str, Any]

PRESENCE_REQUIRED = "required"

# Rule names each facet maps onto a JSON Schema keyword.
NUMBER_RULES = frozenset({"integer", "max", "min", "greater", "less", "multiple"})
STRING_RULES = frozenset({"min", "max", "email", "hostname", "uri", "ip", "regex"})
ARRAY_RULES = frozenset({"max", "min", "length", "unique"})

KNOWN_RULES_BY_TYPE: dict[str, frozenset[str]] = {
    "number": NUMBER_RULES,
    "string": STRING_RULES,
    "array": ARRAY_RULES,
}
