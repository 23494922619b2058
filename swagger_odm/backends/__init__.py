"""Schema backends receiving the compiler's output."""

from swagger_odm.backends.base import create_schema_backend

__all__ = ["create_schema_backend"]
