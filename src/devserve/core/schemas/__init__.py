"""JSON Schema validation for devserve configuration."""

from .validation import (
    SchemaValidationError,
    load_schema,
    validate_payload,
)

__all__ = [
    "SchemaValidationError",
    "load_schema",
    "validate_payload",
]
