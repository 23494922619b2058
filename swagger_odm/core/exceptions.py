"""Custom exceptions for the swagger-odm compiler."""

from __future__ import annotations

from typing import Any, Optional


class SwaggerODMError(Exception):
    """Base exception for all swagger-odm errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SwaggerODMError):
    """Raised when there's a configuration error."""

    pass


class ConnectionError(SwaggerODMError):
    """Raised when a connection to a schema backend fails."""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.backend = backend
        super().__init__(message, details)


class InvalidInputError(SwaggerODMError):
    """Raised when the document is missing or cannot be decoded."""

    pass


class UnrecognizedTypeError(SwaggerODMError):
    """Raised when a property type has no storage mapping."""

    def __init__(
        self,
        type_name: Any,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.type_name = type_name
        msg = message or f"Unrecognized schema type: {type_name}"
        super().__init__(msg, details)


class UnrecognizedFormatError(SwaggerODMError):
    """Raised when a number property carries an unknown format."""

    def __init__(
        self,
        format_name: Any,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.format_name = format_name
        msg = message or f"Unrecognized schema format: {format_name}"
        super().__init__(msg, details)


class MalformedReferenceError(SwaggerODMError):
    """Raised when a $ref pointer does not name a definition."""

    def __init__(
        self,
        reference: Any,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.reference = reference
        details = details or {}
        details["reference"] = reference
        msg = message or f"Malformed reference: {reference}"
        super().__init__(msg, details)


class UnresolvedReferenceError(MalformedReferenceError):
    """Raised when a $ref points to a definition that does not exist."""

    def __init__(
        self,
        reference: Any,
        definition_name: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.definition_name = definition_name
        super().__init__(
            reference,
            message=f"Reference to unknown definition: {definition_name}",
            details=details,
        )


class ValidatorNotFoundError(SwaggerODMError):
    """Raised when a property names a validator that was never registered."""

    def __init__(
        self,
        validator_name: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.validator_name = validator_name
        msg = message or f"Validator not found: {validator_name}"
        super().__init__(msg, details)


class SchemaRegistrationError(SwaggerODMError):
    """Raised when a backend rejects a schema, index or model."""

    def __init__(
        self,
        message: str,
        schema_name: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.schema_name = schema_name
        details = details or {}
        if schema_name:
            details["schema_name"] = schema_name
        super().__init__(message, details)
