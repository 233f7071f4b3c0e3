"""Shared schema validation utilities.

Structured documents (the template registry) are validated with JSON Schema.
Schemas are stored as YAML files under ``tessera.data/schemas`` and loaded
in a single, consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from tessera.core.config.cache import register_cache_clearer
from tessera.core.exceptions import SchemaValidationError
from tessera.data import clear_caches, read_yaml

register_cache_clearer("bundled-data", clear_caches)


def schema_file_name(schema_name: str) -> str:
    """Bundled file name for ``schema_name`` (``.schema.yaml`` appended when bare)."""
    lowered = schema_name.lower()
    if lowered.endswith(".yaml") or lowered.endswith(".yml"):
        return schema_name
    return f"{schema_name}.schema.yaml"


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by name.

    Automatically appends ``.schema.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    schema_name = schema_file_name(schema_name)
    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema {schema_name} must be a mapping")
    return schema


def _format_error(err: Any) -> str:
    location = "/".join(str(p) for p in err.absolute_path) or "<root>"
    return f"{location}: {err.message}"


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        SchemaValidationError: With every violation listed in ``errors``.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors: List[str] = [
        _format_error(e)
        for e in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    ]
    if errors:
        raise SchemaValidationError(
            f"{schema_name} validation failed: {errors[0]}",
            errors=errors,
            context={"schema": schema_file_name(schema_name)},
        )


__all__ = ["load_schema", "schema_file_name", "validate_payload"]
