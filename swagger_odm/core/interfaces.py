"""Core interfaces for the swagger-odm compiler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from swagger_odm.core.models import DocumentModel, DocumentSchema, IndexSpec


class SchemaBackend(ABC):
    """
    Abstract interface for the schema-construction collaborator.

    The compiler hands every compiled property map to ``schema()``, registers
    declared indexes through ``index()`` and finally calls ``model()`` once per
    schema. It never inspects the returned handles.
    """

    @abstractmethod
    def connect(self) -> None:
        """Prepare the backend for registration."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the backend is ready."""
        pass

    @abstractmethod
    def schema(
        self,
        name: str,
        definition: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None,
    ) -> DocumentSchema:
        """Build a schema handle from a compiled property map."""
        pass

    @abstractmethod
    def index(self, schema: DocumentSchema, index: IndexSpec) -> None:
        """Register a compound index on a schema."""
        pass

    @abstractmethod
    def model(self, name: str, schema: DocumentSchema) -> DocumentModel:
        """Register a model for a schema under the given name."""
        pass

    @abstractmethod
    def get_model(self, name: str) -> Optional[DocumentModel]:
        """Retrieve a registered model by name."""
        pass

    @abstractmethod
    def list_models(self) -> List[str]:
        """Names of all registered models."""
        pass
