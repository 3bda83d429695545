from .joi_json_schema_parser import (
    JSON_SCHEMA_DRAFT,
    DescribableSchema,
    InvalidSchemaObject,
    JoiJsonSchemaParser,
)

__all__ = [
    "JSON_SCHEMA_DRAFT",
    "DescribableSchema",
    "InvalidSchemaObject",
    "JoiJsonSchemaParser",
]
