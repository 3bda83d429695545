from .parser import (
    JSON_SCHEMA_DRAFT,
    DescribableSchema,
    InvalidSchemaObject,
    JoiJsonSchemaParser,
)
from .schema_converter import (
    ConversionOptions,
    JoiJsonSchemaError,
    SchemaDepthExceeded,
    UnknownRuleError,
    conversion_options_from_env,
    convert_schema,
)

__all__ = [
    "JSON_SCHEMA_DRAFT",
    "DescribableSchema",
    "InvalidSchemaObject",
    "JoiJsonSchemaParser",
    "ConversionOptions",
    "JoiJsonSchemaError",
    "SchemaDepthExceeded",
    "UnknownRuleError",
    "conversion_options_from_env",
    "convert_schema",
]
