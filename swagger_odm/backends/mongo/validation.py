"""Translation of compiled property maps into MongoDB ``$jsonSchema``."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Tuple

from bson import ObjectId

from swagger_odm.compiler.types import is_type_descriptor

_BSON_TYPES: Dict[type, Any] = {
    float: ["double", "int", "long", "decimal"],
    str: "string",
    bool: "bool",
    datetime: "date",
    ObjectId: "objectId",
}


def to_json_schema(definition: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a ``$jsonSchema`` document for a compiled property map.

    Validator functions and defaults have no ``$jsonSchema`` counterpart and
    are left out. Unknown storage types accept any value.

    Args:
        definition: Compiled property map

    Returns:
        JSON schema with ``bsonType: object``
    """
    properties: Dict[str, Any] = {}
    required = []
    for name, value in definition.items():
        schema, is_required = _field_schema(value)
        properties[name] = schema
        if is_required:
            required.append(name)

    result: Dict[str, Any] = {"bsonType": "object", "properties": properties}
    if required:
        result["required"] = required
    return result


def _field_schema(value: Any) -> Tuple[Dict[str, Any], bool]:
    if isinstance(value, list):
        return _array_schema(value), False

    # Array items produced by the type mapper are bare types
    if isinstance(value, type):
        return _type_schema(value), False

    if is_type_descriptor(value):
        type_value = value["type"]
        if isinstance(type_value, dict):
            schema = to_json_schema(type_value)
        elif isinstance(type_value, list):
            schema = _array_schema(type_value)
        else:
            schema = _type_schema(type_value)
        if isinstance(value.get("enum"), list):
            schema["enum"] = value["enum"]
        return schema, value.get("required") is True

    if isinstance(value, dict):
        return to_json_schema(value), False

    return {}, False


def _array_schema(value: list) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"bsonType": "array"}
    if value:
        items, _ = _field_schema(value[0])
        if items:
            schema["items"] = items
    return schema


def _type_schema(storage_type: Any) -> Dict[str, Any]:
    if isinstance(storage_type, type) and storage_type in _BSON_TYPES:
        return {"bsonType": _BSON_TYPES[storage_type]}
    return {}
