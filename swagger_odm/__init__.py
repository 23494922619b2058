"""
swagger-odm

Compiles the definitions of a Swagger document into document-database
schemas: references are embedded (or stored as ObjectId references when a
definition refers to itself), ``allOf`` compositions are flattened and
``x-swagger-mongoose`` extension metadata adds options, indexes, validators
and extra fields.

Example usage:

    from swagger_odm import compile

    result = compile(open("petstore.json").read())
    result.schemas["Pet"].definition
    # {'name': {'type': <class 'str'>, 'required': True}, ...}

    # Options for every schema, overridden per definition
    result = compile(
        document,
        {"default": {"schema-options": {"timestamps": True}}},
    )

    # Callback style
    compile_async(document, lambda err, result: ...)
"""

__version__ = "0.1.0"

from swagger_odm.compiler import (
    CompilationContext,
    CompilationSession,
    compile,
    compile_async,
    map_type,
)
from swagger_odm.core.config import SwaggerODMConfig
from swagger_odm.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    InvalidInputError,
    MalformedReferenceError,
    SchemaRegistrationError,
    SwaggerODMError,
    UnrecognizedFormatError,
    UnrecognizedTypeError,
    UnresolvedReferenceError,
    ValidatorNotFoundError,
)
from swagger_odm.core.models import (
    CompilationResult,
    CompiledDefinition,
    DocumentModel,
    DocumentSchema,
    IndexSpec,
    PropertyKind,
)

__all__ = [
    # Version
    "__version__",
    # Entry points
    "compile",
    "compile_async",
    "CompilationSession",
    "CompilationContext",
    "map_type",
    # Models
    "CompilationResult",
    "CompiledDefinition",
    "DocumentModel",
    "DocumentSchema",
    "IndexSpec",
    "PropertyKind",
    # Config
    "SwaggerODMConfig",
    # Exceptions
    "SwaggerODMError",
    "ConfigurationError",
    "ConnectionError",
    "InvalidInputError",
    "MalformedReferenceError",
    "UnresolvedReferenceError",
    "UnrecognizedFormatError",
    "UnrecognizedTypeError",
    "ValidatorNotFoundError",
    "SchemaRegistrationError",
]
