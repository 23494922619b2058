"""Compilation session: the public entry point of the schema compiler."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from swagger_odm.backends.base import create_schema_backend
from swagger_odm.compiler.context import CompilationContext
from swagger_odm.compiler.definitions import DefinitionCompiler
from swagger_odm.core.config import SwaggerODMConfig
from swagger_odm.core.exceptions import InvalidInputError
from swagger_odm.core.interfaces import SchemaBackend
from swagger_odm.core.models import CompilationResult, CompiledDefinition

logger = logging.getLogger(__name__)

DEFAULT_EXTRA_KEY = "default"


def decode_document(document: Any) -> Dict[str, Any]:
    """
    Turn a document (mapping, JSON text or bytes) into a private dict.

    Mappings are deep-copied so compilation never touches the caller's data.

    Raises:
        InvalidInputError: If the document is missing or cannot be decoded
    """
    if document is None:
        raise InvalidInputError("Swagger document not supplied")

    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInputError(f"Document is not valid UTF-8: {e}")

    if isinstance(document, str):
        try:
            decoded = json.loads(document)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON document: {e}")
    elif isinstance(document, Mapping):
        decoded = copy.deepcopy(dict(document))
    else:
        raise InvalidInputError(
            "Unknown or invalid document object",
            details={"type": type(document).__name__},
        )

    if not isinstance(decoded, dict):
        raise InvalidInputError("Swagger document must be an object")
    return decoded


def detect_version(document: Mapping[str, Any]) -> Optional[float]:
    """Swagger version declared by the document, if any."""
    version = document.get("swagger")
    if version is None:
        return None
    try:
        return float(version)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable swagger version: {version!r}")
        return None


def apply_extra_definitions(
    definitions: Dict[str, Dict[str, Any]],
    extra_definitions: Optional[Mapping[str, Any]],
    extension_key: str,
) -> None:
    """
    Install extension blocks supplied outside the document.

    Every named entry replaces that definition's extension block. The
    ``default`` entry is then laid under every definition's block: facets
    the definition sets win, and mapping facets such as ``schema-options``
    are merged key by key.
    """
    if not extra_definitions:
        return

    extra = copy.deepcopy(dict(extra_definitions))
    default = extra.pop(DEFAULT_EXTRA_KEY, None)

    for name, block in extra.items():
        if name not in definitions:
            logger.warning(f"Extra definitions name unknown definition: {name}")
            continue
        definitions[name][extension_key] = block

    if default:
        for definition in definitions.values():
            definition[extension_key] = merge_extension_blocks(
                default, definition.get(extension_key)
            )


def merge_extension_blocks(
    base: Mapping[str, Any], override: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Overlay one extension block on another, merging mapping facets."""
    merged = copy.deepcopy(dict(base))
    for facet, value in (override or {}).items():
        if isinstance(value, Mapping) and isinstance(merged.get(facet), Mapping):
            merged[facet] = {**merged[facet], **value}
        else:
            merged[facet] = value
    return merged


class CompilationSession:
    """
    Compiles Swagger documents into document schemas and models.

    Example usage:

    ```python
    from swagger_odm import CompilationSession

    session = CompilationSession()
    result = session.compile(open("api.json").read())
    house = result.schemas["House"].definition
    ```

    A session holds configuration, an optional backend and optional
    pre-registered validators. Compilation state lives in a context built
    per call, so nothing leaks from one run into the next.
    """

    def __init__(
        self,
        config: Optional[SwaggerODMConfig] = None,
        backend: Optional[SchemaBackend] = None,
        validators: Optional[Mapping[str, Callable]] = None,
    ) -> None:
        """
        Initialize the compilation session.

        Args:
            config: Configuration object (optional)
            backend: Schema backend receiving the compiled schemas (optional,
                created from the configuration when omitted)
            validators: Validator functions available by name (optional)
        """
        self._config = config or SwaggerODMConfig()
        self._backend = backend
        self._validators = dict(validators or {})

    @property
    def config(self) -> SwaggerODMConfig:
        """Get the current configuration."""
        return self._config

    def build_context(
        self,
        document: Any,
        extra_definitions: Optional[Any] = None,
    ) -> CompilationContext:
        """
        Decode a document and collect the state for one compilation run.

        Args:
            document: Swagger document (mapping, JSON text or bytes)
            extra_definitions: Extension blocks keyed by definition name

        Returns:
            A fresh CompilationContext
        """
        swagger = decode_document(document)
        if isinstance(extra_definitions, (str, bytes, bytearray)):
            extra_definitions = decode_document(extra_definitions)

        definitions = swagger.get("definitions") or {}
        if not isinstance(definitions, dict):
            raise InvalidInputError("Document 'definitions' must be an object")

        context = CompilationContext(
            definitions=definitions,
            config=self._config.compiler,
            version=detect_version(swagger),
            validators=dict(self._validators),
        )
        extension_key = context.extension_key

        apply_extra_definitions(definitions, extra_definitions, extension_key)

        context.extensions.register_global(swagger.get(extension_key))
        for name, definition in definitions.items():
            context.extensions.register(name, context.extension(definition))
        context.load_validators()

        logger.debug(
            f"Context ready: {len(definitions)} definitions, "
            f"version={context.version}, extension key={extension_key}"
        )
        return context

    def compile_definitions(
        self,
        document: Any,
        extra_definitions: Optional[Any] = None,
    ) -> Dict[str, CompiledDefinition]:
        """
        Compile every definition without handing the result to a backend.

        Excluded definitions are absent from the returned mapping.
        """
        context = self.build_context(document, extra_definitions)
        compiler = DefinitionCompiler(context)

        compiled: Dict[str, CompiledDefinition] = {}
        for name in context.definitions:
            result = compiler.compile(name)
            if result is not None:
                compiled[name] = result
        return compiled

    def compile(
        self,
        document: Any,
        extra_definitions: Optional[Any] = None,
    ) -> CompilationResult:
        """
        Compile a document into schemas and models.

        Args:
            document: Swagger document (mapping, JSON text or bytes)
            extra_definitions: Extension blocks keyed by definition name, with
                ``default`` applied to every definition

        Returns:
            CompilationResult with ``schemas`` and ``models``
        """
        compiled = self.compile_definitions(document, extra_definitions)
        backend = self._get_backend()

        result = CompilationResult()
        for name, definition in compiled.items():
            schema = backend.schema(name, definition.properties, definition.options)
            if definition.index is not None:
                backend.index(schema, definition.index)
            result.schemas[name] = schema

        for name, schema in result.schemas.items():
            result.models[name] = backend.model(name, schema)

        logger.info(f"Compiled {len(result.schemas)} schemas")
        return result

    def compile_async(
        self,
        document: Any,
        callback: Callable[[Optional[Dict[str, Any]], Optional[CompilationResult]], Any],
        extra_definitions: Optional[Any] = None,
    ) -> Any:
        """
        Compile and report through a callback instead of raising.

        The callback receives ``(None, result)`` on success and
        ``({"message": ..., "error": ...}, None)`` on failure.

        Returns:
            Whatever the callback returns
        """
        try:
            result = self.compile(document, extra_definitions)
        except Exception as e:
            logger.debug(f"Compilation failed: {e}")
            return callback({"message": str(e), "error": e}, None)
        return callback(None, result)

    def _get_backend(self) -> SchemaBackend:
        if self._backend is None:
            self._backend = create_schema_backend(self._config.backend)
        if not self._backend.is_connected():
            self._backend.connect()
        return self._backend


def compile(
    document: Any,
    extra_definitions: Optional[Any] = None,
    config: Optional[SwaggerODMConfig] = None,
    backend: Optional[SchemaBackend] = None,
    validators: Optional[Mapping[str, Callable]] = None,
) -> CompilationResult:
    """
    Compile a Swagger document into schemas and models.

    Each call uses a new session; without an explicit backend the models are
    registered in a fresh in-memory backend (or the configured one).
    """
    session = CompilationSession(config=config, backend=backend, validators=validators)
    return session.compile(document, extra_definitions)


def compile_async(
    document: Any,
    callback: Callable[[Optional[Dict[str, Any]], Optional[CompilationResult]], Any],
    extra_definitions: Optional[Any] = None,
    config: Optional[SwaggerODMConfig] = None,
    backend: Optional[SchemaBackend] = None,
    validators: Optional[Mapping[str, Callable]] = None,
) -> Any:
    """Callback flavour of :func:`compile`."""
    session = CompilationSession(config=config, backend=backend, validators=validators)
    return session.compile_async(document, callback, extra_definitions)
