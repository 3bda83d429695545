"""Convert Joi ``describe()`` trees into JSON Schema documents.

A Joi schema can report its own shape through ``describe()``: a nested record
with a ``type`` tag, an ordered list of ``rules`` (``{"name": ..., "arg": ...}``),
``flags``, candidate ``valids`` and, depending on the type, ``children``,
``items`` or ``alternatives``. ``convert_schema`` walks that record and emits
the equivalent JSON Schema fragment.

Each JSON Schema facet has its own setter. The setters run in a fixed order as
a left fold, each receiving the schema built so far and returning a new one:

1. basic properties (``type``, ``examples``, ``description``, ``default``, ``enum``)
2. numeric bounds
3. binary (rewrites the type to ``string``)
4. string lengths, formats and patterns
5. date (rewrites the type to ``integer`` or ``string``)
6. array bounds and item shapes
7. object properties and ``required``
8. alternatives (``oneOf``, with ``type`` removed)

Notes and limitations
---------------------
- The conversion is lossy and one-directional. Rules that have no JSON Schema
  counterpart are dropped; pass ``strict=True`` to fail on them instead, or a
  ``warning_callback`` to hear about them.
- Joi's ``date``, ``date().iso()`` and ``date().timestamp()`` distinctions
  collapse to ``date-time`` strings or plain integers.
- Numeric exclusivity is written in the boolean ``exclusiveMinimum`` /
  ``exclusiveMaximum`` form.
"""

import copy
import re

from functools import reduce
from typing import Any, Callable, Mapping, Optional, Sequence

from .describe_types import (
    KNOWN_RULES_BY_TYPE,
    PRESENCE_REQUIRED,
    JoiDescription,
    JoiRule,
    JSONSchemaNode,
)


_MAX_DEPTH_DEFAULT = 64

_IP_VERSION_DEFAULT = "ipv4"

_JS_REGEX_LITERAL = re.compile(r"^/(?P<source>.*)/(?P<flags>[a-z]*)$", re.DOTALL)


class JoiJsonSchemaError(Exception):
    """Base error for failures while turning a Joi schema into JSON Schema."""

    def __init__(self, message: str, path: Optional[Sequence[str | int]] = None):
        super().__init__(message)
        self.path = list(path or [])


class SchemaDepthExceeded(JoiJsonSchemaError):
    """Raised when a description tree nests deeper than ``max_depth``."""


class UnknownRuleError(JoiJsonSchemaError):
    """Raised in strict mode for a rule with no JSON Schema counterpart."""

    def __init__(
        self,
        message: str,
        rule_name: Any,
        path: Optional[Sequence[str | int]] = None,
    ):
        super().__init__(message, path)
        self.rule_name = rule_name


class _ConversionContext:
    def __init__(
        self,
        strict: bool,
        max_depth: int,
        warning_callback: Optional[Callable[[str], None]],
        path: tuple[str | int, ...] = (),
        depth: int = 0,
    ):
        self.strict = strict
        self.max_depth = max_depth
        self.warning_callback = warning_callback
        self.path = path
        self.depth = depth

    def descend(self, *keys: str | int) -> "_ConversionContext":
        return _ConversionContext(
            self.strict,
            self.max_depth,
            self.warning_callback,
            self.path + keys,
            self.depth + 1,
        )


def format_schema_path(path: Sequence[str | int]) -> str:
    """Render a path into the output schema as a JSON pointer fragment."""
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "#/" + "/".join(parts) if parts else "#"


def _get_rules(description: Mapping[str, Any]) -> list[JoiRule]:
    return [r for r in description.get("rules") or [] if isinstance(r, Mapping)]


def _get_flags(description: Mapping[str, Any]) -> Mapping[str, Any]:
    return description.get("flags") or {}


def _get_field_type(description: Mapping[str, Any]) -> Optional[str]:
    field_type = description.get("type")
    rules = _get_rules(description)
    if field_type == "number" and rules and rules[0].get("name") == "integer":
        field_type = "integer"
    return field_type


def _is_empty_candidate(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _get_enum(description: Mapping[str, Any]) -> Optional[list[Any]]:
    valids = description.get("valids")
    if not valids:
        return None
    enum_list = [copy.deepcopy(v) for v in valids if not _is_empty_candidate(v)]
    return enum_list or None


def _is_required(description: Mapping[str, Any]) -> bool:
    return _get_flags(description).get("presence") == PRESENCE_REQUIRED


def _set_if_not_none(schema: JSONSchemaNode, field: str, value: Any) -> None:
    if value is not None:
        schema[field] = value


def _unmapped_rule_names(description: Mapping[str, Any]) -> list[Any]:
    known = KNOWN_RULES_BY_TYPE.get(description.get("type"), frozenset())
    unmapped = []
    for index, rule in enumerate(_get_rules(description)):
        name = rule.get("name")
        # Only a leading integer rule turns a number into an integer.
        if name not in known or (name == "integer" and index > 0):
            unmapped.append(name)
    return unmapped


def _report_unmapped_rules(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    for name in _unmapped_rule_names(description):
        location = format_schema_path(context.path)
        if context.strict:
            raise UnknownRuleError(
                f"Unsupported rule {name!r} on {description.get('type')} at {location}",
                name,
                context.path,
            )
        if context.warning_callback:
            context.warning_callback(
                f"Dropped unsupported rule {name!r} on "
                f"{description.get('type')} at {location}"
            )
    return schema


def _set_basic_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    retval = dict(schema)
    _set_if_not_none(retval, "type", _get_field_type(description))
    _set_if_not_none(retval, "examples", copy.deepcopy(description.get("examples")))
    _set_if_not_none(retval, "description", description.get("description"))
    _set_if_not_none(
        retval, "default", copy.deepcopy(_get_flags(description).get("default"))
    )
    _set_if_not_none(retval, "enum", _get_enum(description))
    return retval


def _set_number_field_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") not in ("number", "integer"):
        return schema

    retval = dict(schema)
    for rule in _get_rules(description):
        value = copy.deepcopy(rule.get("arg"))
        name = rule.get("name")
        if name == "max":
            retval["maximum"] = value
        elif name == "min":
            retval["minimum"] = value
        elif name == "greater":
            retval["exclusiveMinimum"] = True
            retval["minimum"] = value
        elif name == "less":
            retval["exclusiveMaximum"] = True
            retval["maximum"] = value
        elif name == "multiple":
            retval["multipleOf"] = value
    return retval


def _set_binary_field_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") != "binary":
        return schema

    retval = dict(schema)
    retval["type"] = "string"
    encoding = _get_flags(description).get("encoding")
    if encoding:
        retval["contentEncoding"] = encoding
    retval["format"] = "binary"
    return retval


def _get_ip_versions(arg: Any) -> list[str]:
    version = arg.get("version") if isinstance(arg, Mapping) else None
    if isinstance(version, str):
        return [version]
    return list(version or [])


def _get_regex_source(arg: Any) -> Optional[str]:
    pattern = arg.get("pattern") if isinstance(arg, Mapping) else arg
    if isinstance(pattern, re.Pattern):
        pattern = pattern.pattern
        return pattern if isinstance(pattern, str) else pattern.decode()
    if isinstance(pattern, str):
        # Joi serialises RegExp objects as JavaScript literals, e.g. "/^a+$/i".
        match = _JS_REGEX_LITERAL.match(pattern)
        return match.group("source") if match else pattern
    return None


def _set_string_field_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    # Binary nodes already carry type "string" here; they keep their own facets.
    if schema.get("type") != "string" or description.get("type") != "string":
        return schema

    retval = dict(schema)
    encoding = _get_flags(description).get("encoding")
    if encoding:
        retval["contentEncoding"] = encoding

    for meta in description.get("meta") or []:
        if isinstance(meta, Mapping) and meta.get("contentMediaType"):
            retval["contentMediaType"] = meta["contentMediaType"]

    for rule in _get_rules(description):
        name = rule.get("name")
        arg = rule.get("arg")
        if name == "min":
            retval["minLength"] = arg
        elif name == "max":
            retval["maxLength"] = arg
        elif name in ("email", "hostname", "uri"):
            retval["format"] = name
        elif name == "ip":
            versions = _get_ip_versions(arg)
            if len(versions) == 1:
                retval["format"] = versions[0]
            elif versions:
                retval["oneOf"] = [{"format": v} for v in versions]
            else:
                retval["format"] = _IP_VERSION_DEFAULT
        elif name == "regex":
            _set_if_not_none(retval, "pattern", _get_regex_source(arg))
    return retval


def _set_date_field_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") != "date":
        return schema

    retval = dict(schema)
    if _get_flags(description).get("timestamp"):
        retval["type"] = "integer"
    else:
        # JSON Schema has no date type. Joi cannot tell date, time and
        # date-time apart, so everything else becomes a date-time string.
        retval["type"] = "string"
        retval["format"] = "date-time"
    return retval


def _set_array_field_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") != "array":
        return schema

    retval = dict(schema)
    for rule in _get_rules(description):
        value = copy.deepcopy(rule.get("arg"))
        name = rule.get("name")
        if name == "max":
            retval["maxItems"] = value
        elif name == "min":
            retval["minItems"] = value
        elif name == "length":
            retval["maxItems"] = value
            retval["minItems"] = copy.deepcopy(value)
        elif name == "unique":
            retval["uniqueItems"] = True

    items = description.get("items") or []
    if not items:
        retval["items"] = {}
    elif len(items) == 1:
        retval["items"] = _convert_schema(items[0], context.descend("items"))
    else:
        retval["items"] = {
            "anyOf": [
                _convert_schema(item, context.descend("items", "anyOf", index))
                for index, item in enumerate(items)
            ]
        }
    return retval


def _set_object_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") != "object":
        return schema

    retval = dict(schema)
    retval["properties"] = {}
    retval["required"] = []

    allow_unknown = _get_flags(description).get("allowUnknown")
    if allow_unknown is not None:
        retval["additionalProperties"] = bool(allow_unknown)

    for key, child in (description.get("children") or {}).items():
        child_schema = _convert_schema(child, context.descend("properties", key))
        if _is_required(child):
            retval["required"].append(key)
        retval["properties"][key] = child_schema

    if not retval["required"]:
        del retval["required"]
    return retval


def _set_alternatives_properties(
    schema: JSONSchemaNode,
    description: Mapping[str, Any],
    context: _ConversionContext,
) -> JSONSchemaNode:
    if schema.get("type") != "alternatives":
        return schema

    retval = {k: v for k, v in schema.items() if k != "type"}
    retval["oneOf"] = [
        _convert_schema(alternative, context.descend("oneOf", index))
        for index, alternative in enumerate(description.get("alternatives") or [])
    ]
    return retval


# Binary must precede string, and both must precede date, so that each node is
# rewritten at most once before the type-specific setters look at it.
_FACET_SETTERS: tuple[
    Callable[[JSONSchemaNode, Mapping[str, Any], _ConversionContext], JSONSchemaNode],
    ...,
] = (
    _report_unmapped_rules,
    _set_basic_properties,
    _set_number_field_properties,
    _set_binary_field_properties,
    _set_string_field_properties,
    _set_date_field_properties,
    _set_array_field_properties,
    _set_object_properties,
    _set_alternatives_properties,
)


def _convert_schema(
    description: Mapping[str, Any], context: _ConversionContext
) -> JSONSchemaNode:
    if not isinstance(description, Mapping):
        raise JoiJsonSchemaError(
            f"Expected a Joi description mapping at {format_schema_path(context.path)},"
            f" got {type(description).__name__}",
            context.path,
        )
    if context.depth > context.max_depth:
        raise SchemaDepthExceeded(
            f"Schema nesting exceeds max_depth={context.max_depth}"
            f" at {format_schema_path(context.path)}",
            context.path,
        )

    return reduce(
        lambda schema, setter: setter(schema, description, context),
        _FACET_SETTERS,
        {},
    )


def convert_schema(
    description: JoiDescription | Mapping[str, Any],
    *,
    strict: bool = False,
    max_depth: Optional[int] = None,
    warning_callback: Optional[Callable[[str], None]] = None,
) -> JSONSchemaNode:
    """Convert a Joi description tree into a JSON Schema fragment.

    Args:
        description: The record returned by a Joi schema's ``describe()``.
        strict: Raise ``UnknownRuleError`` for rules without a JSON Schema
            counterpart instead of dropping them.
        max_depth: Maximum nesting of object/array/alternatives nodes.
            Defaults to 64.
        warning_callback: Optional callback receiving one message per dropped
            rule. Not called in strict mode.

    Returns:
        A new JSON Schema dictionary. Nothing in it aliases ``description``.

    Raises:
        SchemaDepthExceeded: If the tree nests deeper than ``max_depth``.
        UnknownRuleError: In strict mode, on the first unsupported rule.
        JoiJsonSchemaError: If a node in the tree is not a mapping.
    """
    if max_depth is None:
        max_depth = _MAX_DEPTH_DEFAULT

    context = _ConversionContext(strict, max_depth, warning_callback)
    return _convert_schema(description, context)
