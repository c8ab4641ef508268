"""Book record validation against the packaged book.schema.json."""

from .validate import (
    CatalogueValidationError,
    ensure_valid,
    load_schema,
    validate_record,
    validate_records,
)

__all__ = [
    "CatalogueValidationError",
    "ensure_valid",
    "load_schema",
    "validate_record",
    "validate_records",
]
