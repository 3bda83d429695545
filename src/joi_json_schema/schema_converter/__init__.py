from .convert_schema import (
    JoiJsonSchemaError,
    SchemaDepthExceeded,
    UnknownRuleError,
    convert_schema,
    format_schema_path,
)
from .describe_types import (
    JoiDescription,
    JoiFlags,
    JoiMeta,
    JoiRule,
    JSONSchemaNode,
)
from .options import ConversionOptions, conversion_options_from_env

__all__ = [
    "JoiJsonSchemaError",
    "SchemaDepthExceeded",
    "UnknownRuleError",
    "convert_schema",
    "format_schema_path",
    "JoiDescription",
    "JoiFlags",
    "JoiMeta",
    "JoiRule",
    "JSONSchemaNode",
    "ConversionOptions",
    "conversion_options_from_env",
]
