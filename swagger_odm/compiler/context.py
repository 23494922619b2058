"""Per-run compilation state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from swagger_odm.compiler.composition import is_composed, merge_composition
from swagger_odm.compiler.extensions import ExtensionRegistry
from swagger_odm.compiler.references import parse_reference
from swagger_odm.compiler.validators import load_validators
from swagger_odm.core.config import CompilerConfig
from swagger_odm.core.exceptions import UnresolvedReferenceError, ValidatorNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class CompilationContext:
    """
    State owned by exactly one compilation run.

    Holds the definition registry, the extension registry, the validator
    registry and the detected Swagger version. A fresh context is built for
    every run and threaded through every compiler component, so independent
    runs never observe each other.
    """

    definitions: Dict[str, Dict[str, Any]]
    config: CompilerConfig = field(default_factory=CompilerConfig)
    version: Optional[float] = None
    extensions: ExtensionRegistry = field(default_factory=ExtensionRegistry)
    validators: Dict[str, Callable] = field(default_factory=dict)
    # Definitions whose schemas are being compiled, outermost first
    resolving: List[str] = field(default_factory=list)
    _normalized: Dict[str, Dict[str, Any]] = field(default_factory=dict, repr=False)

    @property
    def is_legacy(self) -> bool:
        """True for Swagger 1.x documents (or documents without a version)."""
        return self.version is None or self.version < 2

    @property
    def extension_key(self) -> str:
        """Key under which extension metadata is stored for this document."""
        if self.is_legacy:
            return self.config.legacy_extension_key
        return self.config.extension_key

    def extension(self, node: Any) -> Optional[Mapping[str, Any]]:
        """Extension block of a definition or property, if any."""
        if not isinstance(node, Mapping):
            return None
        return node.get(self.extension_key)

    def is_reserved(self, field_name: str) -> bool:
        """Check if a field name belongs to the storage engine."""
        return field_name in self.config.reserved_fields

    def has_definition(self, name: str) -> bool:
        """Check if a definition is registered."""
        return name in self.definitions

    def require_definition(self, name: str) -> str:
        """Return ``name`` if registered, raise otherwise."""
        if name not in self.definitions:
            raise UnresolvedReferenceError(f"#/definitions/{name}", name)
        return name

    def definition(self, name: str) -> Dict[str, Any]:
        """
        Normalized definition by name.

        Compositions are merged the first time a definition is requested and
        the merged form is reused for the rest of the run.
        """
        normalized = self._normalized.get(name)
        if normalized is not None:
            return normalized

        raw = self.definitions.get(self.require_definition(name))
        if is_composed(raw):
            normalized = merge_composition(raw, self.definition, parse_reference)
            logger.debug(f"Normalized composition of {name}")
        else:
            normalized = raw
        self._normalized[name] = normalized
        return normalized

    def validator(self, name: str) -> Callable:
        """Registered validator function by name."""
        try:
            return self.validators[name]
        except KeyError:
            raise ValidatorNotFoundError(
                name, details={"available": sorted(self.validators)}
            )

    def load_validators(self) -> None:
        """Load every validator module named by the extension metadata."""
        for path in self.extensions.validator_paths:
            self.validators.update(
                load_validators(path, base_dir=self.config.validators_base_dir)
            )
