"""
Exception hierarchy for the schema layer.

Schema errors are raised while the type graph is being built and are fatal
at startup. Request errors are raised while a query resolves; the execution
engine turns them into field-level ``null`` values plus entries in the
response's ``errors`` list.
"""

from __future__ import annotations

from typing import Any


class OctographError(Exception):
    """Base exception for the whole application."""

    code: str = "INTERNAL_SERVER_ERROR"

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code}


# ── Schema construction ─────────────────────────────────────────────────────


class SchemaError(OctographError):
    """The type graph is invalid or was modified after being closed."""

    code = "SCHEMA_ERROR"


class DuplicateTypeError(SchemaError):
    """A type with the same name is already registered."""

    def __init__(self, type_name: str):
        super().__init__(f"Type '{type_name}' is already registered")
        self.type_name = type_name


class UnknownTypeError(SchemaError):
    """No type with the given name is registered."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown type '{type_name}'")
        self.type_name = type_name


class UnknownFieldError(SchemaError):
    """The type exists but declares no field with the given name."""

    def __init__(self, type_name: str, field_name: str):
        super().__init__(f"Type '{type_name}' has no field '{field_name}'")
        self.type_name = type_name
        self.field_name = field_name


class DuplicateHandlerError(SchemaError):
    """A root field already has a handler bound to it."""

    def __init__(self, field_name: str):
        super().__init__(f"A handler for root field '{field_name}' is already registered")
        self.field_name = field_name


# ── Request time ────────────────────────────────────────────────────────────


class QueryValidationError(OctographError):
    """The request document cannot be executed against the schema."""

    code = "GRAPHQL_VALIDATION_FAILED"


class ArgumentValidationError(OctographError):
    """A field argument is missing, unknown, or rejected by its scalar."""

    code = "ARGUMENT_VALIDATION_FAILED"


class DataSourceError(OctographError):
    """An external collaborator failed to produce a value."""

    code = "DATA_SOURCE_FAILED"


class RateLimitError(DataSourceError):
    """The upstream API refused the call because the quota is exhausted."""

    code = "RATE_LIMITED"


class UnresolvableTypeError(OctographError):
    """An interface discriminator found no concrete type for a value."""

    code = "UNRESOLVABLE_TYPE"

    def __init__(self, interface_name: str, tag: Any):
        super().__init__(
            f"Abstract type '{interface_name}' could not resolve a concrete type for value "
            f"with type tag {tag!r}"
        )
        self.interface_name = interface_name
        self.tag = tag


class ValueCompletionError(OctographError):
    """A resolved value does not fit the field's declared output type."""
