"""Loading Swagger documents and saving compiled schemas."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from swagger_odm.compiler.types import storage_type_name
from swagger_odm.core.exceptions import InvalidInputError
from swagger_odm.core.models import DocumentSchema

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a Swagger document from a JSON or YAML file.

    Args:
        path: Path to the document

    Returns:
        Decoded document

    Raises:
        InvalidInputError: If the file is missing or cannot be decoded
    """
    path = Path(path)

    if not path.exists():
        raise InvalidInputError(f"Document not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except yaml.YAMLError as e:
        raise InvalidInputError(f"Invalid YAML in document: {e}")
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Invalid JSON in document: {e}")

    if not isinstance(data, dict):
        raise InvalidInputError(f"Document must contain an object: {path}")

    logger.debug(f"Loaded document {path}")
    return data


def load_extra_definitions(path: Union[str, Path]) -> Dict[str, Any]:
    """Load extra definitions (extension blocks by definition name)."""
    return load_document(path)


def to_serializable(value: Any) -> Any:
    """
    Render a compiled property map with storage types as names.

    Validator functions are rendered by their function name.
    """
    if isinstance(value, Mapping):
        return {key: to_serializable(item) for key, item in value.items()}
    if isinstance(value, list):
        if value and isinstance(value[0], type):
            return storage_type_name(value)
        return [to_serializable(item) for item in value]
    if isinstance(value, type):
        return storage_type_name(value)
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return value


def save_compiled(
    schemas: Mapping[str, DocumentSchema], path: Union[str, Path]
) -> None:
    """
    Save compiled schemas to a JSON or YAML file.

    Args:
        schemas: Schema handles by name
        path: Output path; the suffix selects the format
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        name: {
            "properties": to_serializable(schema.definition),
            "options": to_serializable(schema.options),
            "indexes": [index.model_dump() for index in schema.indexes],
        }
        for name, schema in schemas.items()
    }

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved {len(data)} compiled definitions to {path}")
