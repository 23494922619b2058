"""Schema backend base and factory functions."""

from __future__ import annotations

from typing import Union

from swagger_odm.core.config import BackendConfig
from swagger_odm.core.exceptions import ConfigurationError
from swagger_odm.core.interfaces import SchemaBackend


def create_schema_backend(config: Union[BackendConfig, dict]) -> SchemaBackend:
    """
    Create a schema backend based on configuration.

    Args:
        config: Backend configuration object or dict

    Returns:
        Configured SchemaBackend instance

    Raises:
        ConfigurationError: If backend type is not supported
    """
    if isinstance(config, dict):
        config = BackendConfig(**config)

    backend_type = config.backend.lower()

    if backend_type == "memory":
        from swagger_odm.backends.memory.client import MemorySchemaBackend

        return MemorySchemaBackend(config.memory)
    elif backend_type == "mongo":
        from swagger_odm.backends.mongo.client import MongoSchemaBackend

        return MongoSchemaBackend(config.mongo)
    else:
        raise ConfigurationError(
            f"Unsupported schema backend: {backend_type}",
            details={"supported_backends": ["memory", "mongo"]},
        )


__all__ = ["create_schema_backend"]
