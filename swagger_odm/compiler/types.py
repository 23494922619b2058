"""Mapping of Swagger primitive types to storage types."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping

from bson import ObjectId

from swagger_odm.core.exceptions import UnrecognizedFormatError, UnrecognizedTypeError

ALLOWED_TYPES = (
    "number",
    "integer",
    "long",
    "float",
    "double",
    "string",
    "password",
    "boolean",
    "date",
    "dateTime",
    "array",
)

NUMBER_FORMATS = ("integer", "long", "float", "double")

# Storage type for foreign references between documents
REFERENCE_TYPE = ObjectId

_SCALAR_TYPES: Dict[str, type] = {
    "integer": float,
    "long": float,
    "float": float,
    "double": float,
    "string": str,
    "password": str,
    "boolean": bool,
    "date": datetime,
    "dateTime": datetime,
}


def map_type(descriptor: Mapping[str, Any]) -> Any:
    """
    Map a primitive type descriptor to its storage type.

    All numeric kinds share one storage type; precision is not preserved.
    Arrays map to a one-element list holding the item storage type.

    Args:
        descriptor: Mapping with ``type`` and optionally ``format``/``items``

    Returns:
        A Python type, or ``[T]`` for arrays

    Raises:
        UnrecognizedFormatError: ``number`` with an unknown format
        UnrecognizedTypeError: Any other unknown type
    """
    type_name = descriptor.get("type")

    if type_name == "number":
        format_name = descriptor.get("format")
        if format_name not in NUMBER_FORMATS:
            raise UnrecognizedFormatError(format_name)
        return float

    if type_name == "array":
        items = descriptor.get("items")
        if not isinstance(items, Mapping):
            raise UnrecognizedTypeError(None, message="Array property has no item schema")
        return [map_type(items)]

    if isinstance(type_name, str) and type_name in _SCALAR_TYPES:
        return _SCALAR_TYPES[type_name]

    raise UnrecognizedTypeError(type_name)


def is_allowed_type(type_name: Any) -> bool:
    """Check if a type name has a storage mapping."""
    return isinstance(type_name, str) and type_name in ALLOWED_TYPES


def is_simple_schema(schema: Any) -> bool:
    """Check if a mapping is a bare scalar/array descriptor."""
    return isinstance(schema, Mapping) and is_allowed_type(schema.get("type"))


class EmbeddedSchema(dict):
    """Compiled field map of an embedded object, told apart from descriptors."""


def is_type_descriptor(value: Any) -> bool:
    """
    Check if a compiled value is a ``{"type": ...}`` descriptor.

    Embedded maps are EmbeddedSchema instances and never descriptors, even
    when one of their fields is named ``type``. An embedded map wrapped to
    carry facets (``{"type": EmbeddedSchema, "required": True}``) is one.
    """
    if isinstance(value, EmbeddedSchema):
        return False
    if not isinstance(value, dict) or "type" not in value:
        return False
    return isinstance(value["type"], (type, list, str, dict))


def storage_type_name(storage_type: Any) -> str:
    """Human readable name of a storage type (``[str]`` for arrays)."""
    if isinstance(storage_type, list):
        inner = storage_type[0] if storage_type else None
        return f"[{storage_type_name(inner)}]"
    if isinstance(storage_type, type):
        return storage_type.__name__
    return str(storage_type)
