"""Registry of document- and definition-level extension metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from swagger_odm.core.models import IndexSpec

logger = logging.getLogger(__name__)

SCHEMA_OPTIONS = "schema-options"
EXCLUDE_SCHEMA = "exclude-schema"
ADDITIONAL_PROPERTIES = "additional-properties"
INDEX = "index"
VALIDATORS = "validators"


@dataclass
class ExtensionRegistry:
    """
    Extension facets collected for one compilation run.

    Global facets come from the document-level extension block and apply to
    every definition; definition-level facets override them where the two
    are combined.
    """

    schema_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    exclude_schema: Dict[str, Any] = field(default_factory=dict)
    additional_properties: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    document_index: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    global_schema_options: Dict[str, Any] = field(default_factory=dict)
    global_exclude: Any = None
    global_additional_properties: Dict[str, Any] = field(default_factory=dict)
    validator_paths: List[str] = field(default_factory=list)

    def register_global(self, block: Optional[Mapping[str, Any]]) -> None:
        """Register the document-level extension block."""
        if not block:
            return
        if block.get(SCHEMA_OPTIONS):
            self.global_schema_options = dict(block[SCHEMA_OPTIONS])
        if block.get(EXCLUDE_SCHEMA):
            self.global_exclude = block[EXCLUDE_SCHEMA]
        if block.get(ADDITIONAL_PROPERTIES):
            self.global_additional_properties = dict(block[ADDITIONAL_PROPERTIES])
        if block.get(VALIDATORS):
            self.validator_paths.append(block[VALIDATORS])

    def register(self, name: str, block: Optional[Mapping[str, Any]]) -> None:
        """Register a definition-level extension block."""
        if not block:
            return
        if block.get(SCHEMA_OPTIONS):
            self.schema_options[name] = dict(block[SCHEMA_OPTIONS])
        if block.get(EXCLUDE_SCHEMA):
            self.exclude_schema[name] = block[EXCLUDE_SCHEMA]
        if block.get(ADDITIONAL_PROPERTIES):
            self.additional_properties[name] = dict(block[ADDITIONAL_PROPERTIES])
        if block.get(INDEX):
            self.document_index[name] = dict(block[INDEX])
        if block.get(VALIDATORS):
            self.validator_paths.append(block[VALIDATORS])

    def is_excluded(self, name: str) -> bool:
        """Check if no schema should be emitted for a definition."""
        if self.exclude_schema.get(name):
            return True
        if isinstance(self.global_exclude, (list, tuple, set)):
            return name in self.global_exclude
        return bool(self.global_exclude)

    def options_for(self, name: str) -> Dict[str, Any]:
        """Global schema options overlaid with the definition's own."""
        return {**self.global_schema_options, **self.schema_options.get(name, {})}

    def additional_properties_for(self, name: str) -> Dict[str, Any]:
        """Global additional properties overlaid with the definition's own."""
        return {
            **self.global_additional_properties,
            **self.additional_properties.get(name, {}),
        }

    def index_for(self, name: str) -> Optional[IndexSpec]:
        """
        Index directive for a definition.

        The ``unique`` flag is consumed into ``IndexSpec.unique`` and never
        appears among the index fields.
        """
        index = dict(self.document_index.get(name) or {})
        unique = bool(index.pop("unique", False))
        if not index:
            return None
        return IndexSpec(fields=index, unique=unique)
