"""Per-property compilation into storage descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

from swagger_odm.compiler.composition import is_composed, merge_composition
from swagger_odm.compiler.references import (
    ReferenceResolver,
    parse_reference,
    reference_descriptor,
)
from swagger_odm.compiler.types import (
    EmbeddedSchema,
    is_simple_schema,
    is_type_descriptor,
    map_type,
)
from swagger_odm.core.exceptions import InvalidInputError
from swagger_odm.core.models import PropertyKind

if TYPE_CHECKING:
    from swagger_odm.compiler.context import CompilationContext

logger = logging.getLogger(__name__)

# Keys consumed by the type mapper and dropped once a storage type is set
_TYPE_SOURCE_KEYS = ("items", "format")

# Schema keywords whose values are mappings but never shorthand fields
SCHEMA_KEYWORDS = (
    "additionalProperties",
    "default",
    "example",
    "externalDocs",
    "items",
    "xml",
)


@dataclass
class NormalizedProperty:
    """A property classified once, before it is compiled."""

    kind: PropertyKind
    field_name: str
    body: Mapping[str, Any]
    extension: Optional[Mapping[str, Any]] = None
    target: Optional[str] = None
    is_array: bool = False


def normalize_property(
    prop: Any,
    field_name: str,
    owner: Optional[str],
    context: "CompilationContext",
) -> NormalizedProperty:
    """
    Classify a raw property into a PropertyKind.

    Precedence: extension override on the property, extension override on
    the array items, reference, composition, embedded object, array, scalar.
    """
    if not isinstance(prop, Mapping):
        raise InvalidInputError(
            f"Property '{field_name}' is not an object",
            details={"owner": owner, "value": prop},
        )

    extension = context.extension(prop)
    if extension:
        return NormalizedProperty(
            PropertyKind.EXTENSION_OVERRIDE, field_name, prop, extension=extension
        )

    items = prop.get("items")
    item_extension = context.extension(items)
    if item_extension:
        return NormalizedProperty(
            PropertyKind.EXTENSION_OVERRIDE,
            field_name,
            prop,
            extension=item_extension,
            is_array=True,
        )

    is_array = isinstance(items, Mapping)
    reference = prop.get("$ref")
    if reference is None and prop.get("type") == "array" and is_array:
        reference = items.get("$ref")
    if reference is not None:
        target = parse_reference(reference)
        is_self = target == owner or (
            context.config.detect_cycles and target in context.resolving
        )
        return NormalizedProperty(
            PropertyKind.SELF_REFERENCE if is_self else PropertyKind.REFERENCE,
            field_name,
            prop,
            target=target,
            is_array=is_array,
        )

    if is_composed(prop):
        return NormalizedProperty(PropertyKind.COMPOSED, field_name, prop)

    type_name = prop.get("type")
    if not type_name or type_name == "object":
        return NormalizedProperty(PropertyKind.EMBEDDED, field_name, prop)
    if type_name == "array":
        return NormalizedProperty(PropertyKind.ARRAY, field_name, prop, is_array=True)
    return NormalizedProperty(PropertyKind.SCALAR, field_name, prop)


def fill_required(value: Any, field_name: str, required: Any) -> Any:
    """Apply the owner's required list or blanket required flag to a field."""
    if isinstance(required, bool):
        return with_facets(value, required=required)
    if isinstance(required, (list, tuple, set)) and field_name in required:
        return with_facets(value, required=True)
    return value


def with_facets(value: Any, **facets: Any) -> Any:
    """
    Attach facets such as ``required`` or ``default`` to a descriptor.

    Typed descriptors take the facets directly. Embedded maps and arrays are
    wrapped as ``{"type": value, ...}`` so the facets never read as fields.
    """
    if is_type_descriptor(value):
        value.update(facets)
        return value
    return {"type": value, **facets}


class PropertyCompiler:
    """
    Compiles Swagger properties into storage descriptors.

    Each property is normalized into a PropertyKind first and then handed to
    the matching handler. Reference properties go through the
    ReferenceResolver, which calls back into this compiler to embed the
    referenced definitions.
    """

    def __init__(self, context: "CompilationContext") -> None:
        """
        Initialize the property compiler.

        Args:
            context: Compilation state for the current run
        """
        self._context = context
        self._references = ReferenceResolver(context, self)
        self._handlers: Dict[PropertyKind, Callable[[NormalizedProperty], Any]] = {
            PropertyKind.EXTENSION_OVERRIDE: self._compile_extension,
            PropertyKind.REFERENCE: self._references.resolve,
            PropertyKind.SELF_REFERENCE: self._references.resolve,
            PropertyKind.COMPOSED: self._compile_composed,
            PropertyKind.EMBEDDED: self._compile_embedded,
            PropertyKind.ARRAY: self._compile_typed,
            PropertyKind.SCALAR: self._compile_typed,
        }

    @property
    def references(self) -> ReferenceResolver:
        """The reference resolver bound to this compiler."""
        return self._references

    def compile_property(
        self,
        prop: Any,
        field_name: str,
        required: Any = None,
        owner: Optional[str] = None,
    ) -> Any:
        """
        Compile one property.

        Args:
            prop: Raw property mapping
            field_name: Name of the field in its owner
            required: Owner's required list, or a blanket boolean
            owner: Name of the definition being compiled

        Returns:
            Storage descriptor, or None when the field is omitted
        """
        if self._context.is_reserved(field_name):
            logger.debug(f"Skipping reserved field '{field_name}'")
            return None

        normalized = normalize_property(prop, field_name, owner, self._context)
        value = self._handlers[normalized.kind](normalized)
        if value is None:
            return None

        value = fill_required(value, field_name, required)
        if "default" in prop:
            value = with_facets(value, default=prop["default"])
        return value

    def compile_property_set(self, owner: str, node: Mapping[str, Any]) -> Any:
        """
        Compile every field of a definition or nested object.

        A node without ``properties`` that is itself a bare scalar shape
        compiles to that scalar type.

        Args:
            owner: Name used for self-reference detection
            node: Definition or nested object mapping

        Returns:
            Compiled property map
        """
        if is_composed(node):
            node = merge_composition(node, self._context.definition, parse_reference)

        properties = node.get("properties")
        if properties is None:
            type_name = node.get("type")
            if type_name == "object":
                # Free-form map; keywords such as additionalProperties are not fields
                properties = {}
            elif type_name is not None:
                return {"type": map_type(node)}
            else:
                # Shorthand nested objects list their fields directly
                properties = {
                    key: value
                    for key, value in node.items()
                    if isinstance(value, Mapping)
                    and key != self._context.extension_key
                    and key not in SCHEMA_KEYWORDS
                }

        required = node.get("required")
        compiled = EmbeddedSchema()
        for field_name, prop in properties.items():
            value = self.compile_property(prop, field_name, required, owner)
            if value is not None:
                compiled[field_name] = value
        return compiled

    def _compile_extension(self, prop: NormalizedProperty) -> Any:
        context = self._context
        extension = prop.extension or {}
        base = prop.body["items"] if prop.is_array else prop.body

        if context.is_legacy:
            reference = base.get("$ref")
            if reference and extension.get("type") == "objectId":
                target = context.require_definition(parse_reference(reference))
                value = reference_descriptor(
                    target, include_ref=extension.get("includeSwaggerRef") is not False
                )
                return [value] if prop.is_array else value
        else:
            reference = extension.get("$ref")
            if reference:
                target = context.require_definition(parse_reference(reference))
                value = reference_descriptor(target)
                return [value] if prop.is_array else value

        stripped = {key: val for key, val in base.items() if key != context.extension_key}
        if extension.get("validator"):
            value = dict(stripped)
            value["validate"] = context.validator(extension["validator"])
        else:
            value = {**stripped, **extension}

        if is_simple_schema(value):
            value["type"] = map_type(value)
            for key in _TYPE_SOURCE_KEYS:
                value.pop(key, None)

        return [value] if prop.is_array else value

    def _compile_composed(self, prop: NormalizedProperty) -> Any:
        # The merged fields belong to the owning node; nothing is emitted here
        logger.debug(f"Field '{prop.field_name}' declares a composition; omitted")
        return None

    def _compile_embedded(self, prop: NormalizedProperty) -> Any:
        return self.compile_property_set(prop.field_name, prop.body)

    def _compile_typed(self, prop: NormalizedProperty) -> Any:
        value: Dict[str, Any] = {"type": map_type(prop.body)}
        enum = prop.body.get("enum")
        if isinstance(enum, list):
            value["enum"] = enum
        return value
