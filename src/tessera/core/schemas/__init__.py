"""JSON Schema validation for Tessera documents."""
from __future__ import annotations

from .validation import load_schema, schema_file_name, validate_payload

__all__ = ["load_schema", "schema_file_name", "validate_payload"]
