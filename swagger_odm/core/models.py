"""Core data models for the swagger-odm compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class PropertyKind(str, Enum):
    """How a single property is compiled."""

    SCALAR = "scalar"
    ARRAY = "array"
    REFERENCE = "reference"
    SELF_REFERENCE = "self_reference"
    COMPOSED = "composed"
    EMBEDDED = "embedded"
    EXTENSION_OVERRIDE = "extension_override"


class IndexSpec(BaseModel):
    """A compound index declared for a document schema."""

    fields: Dict[str, Any]
    unique: bool = False

    @field_validator("fields")
    @classmethod
    def validate_fields(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("Index must declare at least one field")
        return v


class DocumentSchema(BaseModel):
    """Schema handle returned by a backend for one compiled definition."""

    name: str
    definition: Dict[str, Any] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)
    indexes: List[IndexSpec] = Field(default_factory=list)

    @property
    def field_names(self) -> List[str]:
        """Top-level field names of the compiled definition."""
        return list(self.definition.keys())


@dataclass
class CompiledDefinition:
    """Output of compiling one definition, before it reaches a backend."""

    name: str
    properties: Dict[str, Any]
    options: Dict[str, Any] = field(default_factory=dict)
    index: Optional[IndexSpec] = None


@dataclass
class DocumentModel:
    """A model registered for a schema (optionally bound to a collection)."""

    name: str
    schema: DocumentSchema
    collection: Any = None


@dataclass
class CompilationResult:
    """Schemas and models produced by one compilation run."""

    schemas: Dict[str, DocumentSchema] = field(default_factory=dict)
    models: Dict[str, DocumentModel] = field(default_factory=dict)

    def __iter__(self):
        # Allows ``schemas, models = compile(...)``
        yield self.schemas
        yield self.models
