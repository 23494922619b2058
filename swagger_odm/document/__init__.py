"""Swagger document utilities."""

from swagger_odm.document.loader import (
    load_document,
    load_extra_definitions,
    save_compiled,
    to_serializable,
)

__all__ = [
    "load_document",
    "load_extra_definitions",
    "save_compiled",
    "to_serializable",
]
