"""In-memory schema backend implementation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from swagger_odm.core.config import MemoryBackendConfig
from swagger_odm.core.exceptions import SchemaRegistrationError
from swagger_odm.core.interfaces import SchemaBackend
from swagger_odm.core.models import DocumentModel, DocumentSchema, IndexSpec

logger = logging.getLogger(__name__)


class MemorySchemaBackend(SchemaBackend):
    """In-memory implementation of the schema backend."""

    def __init__(self, config: Optional[MemoryBackendConfig] = None) -> None:
        """
        Initialize in-memory schema backend.

        Args:
            config: Optional backend configuration
        """
        self._config = config or MemoryBackendConfig()
        self._models: Dict[str, DocumentModel] = {}
        self._connected = False

    def connect(self) -> None:
        """Start with an empty model registry."""
        self._models = {}
        self._connected = True
        logger.info("In-memory schema backend initialized")

    def disconnect(self) -> None:
        """Drop all registered models."""
        self._models = {}
        self._connected = False
        logger.info("In-memory schema backend disconnected")

    def is_connected(self) -> bool:
        """Check if the backend is initialized."""
        return self._connected

    def schema(
        self,
        name: str,
        definition: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None,
    ) -> DocumentSchema:
        """Wrap a compiled property map in a schema handle."""
        return DocumentSchema(name=name, definition=definition, options=options or {})

    def index(self, schema: DocumentSchema, index: IndexSpec) -> None:
        """Record an index on the schema."""
        schema.indexes.append(index)
        logger.debug(f"Registered index on {schema.name}: {index.fields}")

    def model(self, name: str, schema: DocumentSchema) -> DocumentModel:
        """Register a model for a schema."""
        if name in self._models:
            if not self._config.replace_models:
                raise SchemaRegistrationError(
                    f"Model already registered: {name}", schema_name=name
                )
            logger.warning(f"Replacing registered model: {name}")

        model = DocumentModel(name=name, schema=schema)
        self._models[name] = model
        return model

    def get_model(self, name: str) -> Optional[DocumentModel]:
        """Retrieve a registered model by name."""
        return self._models.get(name)

    def list_models(self) -> List[str]:
        """Names of all registered models."""
        return list(self._models.keys())
