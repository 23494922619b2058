"""In-memory schema backend."""

from swagger_odm.backends.memory.client import MemorySchemaBackend

__all__ = ["MemorySchemaBackend"]
