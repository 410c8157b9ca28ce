"""Schema validation for the harness configuration.

Schemas are JSON Schema documents expressed in YAML and bundled under
``opharness.data/schemas/``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from opharness.core.exceptions import ConfigError
from opharness.data import read_yaml as read_data_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by file name (``.yaml`` appended when missing).

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    schema = read_data_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def collect_errors(payload: Dict[str, Any], schema_name: str) -> List[str]:
    """Validate a payload and return error messages (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        ConfigError: With every validation message in ``context["errors"]``.
    """
    errors = collect_errors(payload, schema_name)
    if errors:
        raise ConfigError(
            f"Configuration is invalid against '{schema_name}': {'; '.join(errors)}",
            context={"schema": schema_name, "errors": errors},
        )


__all__ = ["load_schema", "collect_errors", "validate_payload"]
