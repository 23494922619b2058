"""Compilation of whole definitions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from swagger_odm.compiler.context import CompilationContext
from swagger_odm.compiler.properties import PropertyCompiler
from swagger_odm.core.models import CompiledDefinition

logger = logging.getLogger(__name__)


class DefinitionCompiler:
    """
    Compiles a named definition into a flat, ORM-ready property map.

    Besides the definition's own properties this applies the extension
    facets collected in the context: exclusion, schema options, additional
    properties and the document index.
    """

    def __init__(self, context: CompilationContext) -> None:
        """
        Initialize the definition compiler.

        Args:
            context: Compilation state for the current run
        """
        self._context = context
        self._properties = PropertyCompiler(context)

    @property
    def properties(self) -> PropertyCompiler:
        """The property compiler used for every field."""
        return self._properties

    def compile(self, name: str) -> Optional[CompiledDefinition]:
        """
        Compile a definition.

        Args:
            name: Definition name

        Returns:
            CompiledDefinition, or None if the definition is excluded
        """
        extensions = self._context.extensions
        if extensions.is_excluded(name):
            logger.debug(f"Definition {name} is excluded; no schema emitted")
            return None

        definition = self._context.definition(name)

        self._context.resolving.append(name)
        try:
            properties = self._properties.compile_property_set(name, definition)
        finally:
            self._context.resolving.pop()

        properties.update(self._compile_additional_properties(name))

        compiled = CompiledDefinition(
            name=name,
            properties=properties,
            options=extensions.options_for(name),
            index=extensions.index_for(name),
        )
        logger.debug(f"Compiled {name}: {len(properties)} fields")
        return compiled

    def _compile_additional_properties(self, name: str) -> Dict[str, Any]:
        extension_key = self._context.extension_key
        compiled: Dict[str, Any] = {}
        for field_name, prop in self._context.extensions.additional_properties_for(
            name
        ).items():
            wrapped = {extension_key: prop}
            value = self._properties.compile_property(
                wrapped, field_name, prop.get("required"), name
            )
            if value is not None:
                compiled[field_name] = value
        return compiled
