"""Swagger definition to document schema compiler."""

from swagger_odm.compiler.composition import merge_composition
from swagger_odm.compiler.context import CompilationContext
from swagger_odm.compiler.definitions import DefinitionCompiler
from swagger_odm.compiler.properties import (
    NormalizedProperty,
    PropertyCompiler,
    normalize_property,
)
from swagger_odm.compiler.references import (
    ReferenceResolver,
    parse_reference,
    reference_descriptor,
)
from swagger_odm.compiler.session import (
    CompilationSession,
    compile,
    compile_async,
)
from swagger_odm.compiler.types import REFERENCE_TYPE, EmbeddedSchema, map_type

__all__ = [
    # Entry points
    "compile",
    "compile_async",
    "CompilationSession",
    # Components
    "CompilationContext",
    "DefinitionCompiler",
    "PropertyCompiler",
    "ReferenceResolver",
    "NormalizedProperty",
    # Functions
    "map_type",
    "merge_composition",
    "normalize_property",
    "parse_reference",
    "reference_descriptor",
    "REFERENCE_TYPE",
    "EmbeddedSchema",
]
