"""Resolution of ``$ref`` properties into embedded schemas or references."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Dict, Mapping

from swagger_odm.compiler.types import REFERENCE_TYPE
from swagger_odm.core.exceptions import MalformedReferenceError
from swagger_odm.core.models import PropertyKind

if TYPE_CHECKING:
    from swagger_odm.compiler.context import CompilationContext
    from swagger_odm.compiler.properties import NormalizedProperty, PropertyCompiler

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"^#/definitions/(\w+)$")

CONTAINER_TYPES = ("array", "object")


def parse_reference(reference: Any) -> str:
    """
    Extract the definition name from a ``#/definitions/<Name>`` pointer.

    Raises:
        MalformedReferenceError: If the pointer does not match
    """
    if not isinstance(reference, str):
        raise MalformedReferenceError(reference)
    match = REFERENCE_PATTERN.match(reference)
    if not match:
        raise MalformedReferenceError(reference)
    return match.group(1)


def reference_descriptor(target: str, include_ref: bool = True) -> Dict[str, Any]:
    """Foreign reference to another document, stored as an ObjectId."""
    descriptor: Dict[str, Any] = {"type": REFERENCE_TYPE}
    if include_ref:
        descriptor["ref"] = target
    return descriptor


def is_container(definition: Mapping[str, Any]) -> bool:
    """
    Check if a definition is a structural type that is embedded whole.

    Definitions without a ``type`` that still declare ``properties`` (or a
    composition) are treated as objects.
    """
    type_name = definition.get("type")
    if type_name in CONTAINER_TYPES:
        return True
    return type_name is None and ("properties" in definition or "allOf" in definition)


class ReferenceResolver:
    """
    Resolves reference properties against the definition registry.

    A reference to another definition embeds that definition's compiled
    schema. A reference back to the definition being compiled becomes a
    lightweight foreign reference instead, which is what lets recursive
    definition graphs terminate. Indirect cycles are only cut when
    ``detect_cycles`` is enabled in the compiler configuration.
    """

    def __init__(
        self,
        context: "CompilationContext",
        compiler: "PropertyCompiler",
    ) -> None:
        self._context = context
        self._compiler = compiler

    def resolve(self, prop: "NormalizedProperty") -> Any:
        """
        Compile a reference property.

        Args:
            prop: Normalized property of kind REFERENCE or SELF_REFERENCE

        Returns:
            Embedded schema, list-wrapped schema, or reference descriptor
        """
        target = prop.target
        if prop.kind is PropertyKind.SELF_REFERENCE:
            self._context.require_definition(target)
            logger.debug(f"Field '{prop.field_name}' is a foreign reference to {target}")
            descriptor = reference_descriptor(target)
            return [descriptor] if prop.is_array else descriptor

        definition = self._context.definition(target)
        self._context.resolving.append(target)
        try:
            if is_container(definition):
                value = self._embed_container(target, definition)
                if prop.is_array or definition.get("type") == "array":
                    value = [value]
            else:
                value = self._embed_simple(target, definition, prop.field_name)
                if prop.is_array:
                    value = [value]
        finally:
            self._context.resolving.pop()

        logger.debug(f"Field '{prop.field_name}' embeds {target}")
        return value

    def _embed_container(self, target: str, definition: Mapping[str, Any]) -> Any:
        if definition.get("type") == "array":
            items = definition.get("items") or {}
            return self._compiler.compile_property(items, target, owner=target)
        return self._compiler.compile_property_set(target, definition)

    def _embed_simple(
        self, target: str, definition: Mapping[str, Any], field_name: str
    ) -> Any:
        clone = {
            key: value
            for key, value in definition.items()
            if key != self._context.extension_key
        }
        return self._compiler.compile_property(clone, field_name, owner=target)
