"""MongoDB schema backend module."""

from swagger_odm.backends.mongo.client import MongoSchemaBackend
from swagger_odm.backends.mongo.validation import to_json_schema

__all__ = [
    "MongoSchemaBackend",
    "to_json_schema",
]
