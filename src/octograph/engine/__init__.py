"""Schema layer: type registry, root field handlers and resolution engine."""

from .errors import (
    ArgumentValidationError,
    DataSourceError,
    DuplicateHandlerError,
    DuplicateTypeError,
    OctographError,
    QueryValidationError,
    RateLimitError,
    SchemaError,
    UnknownFieldError,
    UnknownTypeError,
    UnresolvableTypeError,
    ValueCompletionError,
)
from .execution import ResolutionEngine
from .handlers import FunctionHandler, HandlerRegistry, RootFieldHandler
from .registry import TypeRegistry
from .scalars import URI, Boolean, DateTime, Float, ID, Int, String
from .types import (
    Argument,
    Field,
    InterfaceType,
    ListOf,
    NonNull,
    ObjectType,
    ScalarType,
    discriminate_by_tag,
)

__all__ = [
    "Argument",
    "ArgumentValidationError",
    "Boolean",
    "DataSourceError",
    "DateTime",
    "DuplicateHandlerError",
    "DuplicateTypeError",
    "Field",
    "Float",
    "FunctionHandler",
    "HandlerRegistry",
    "ID",
    "Int",
    "InterfaceType",
    "ListOf",
    "NonNull",
    "ObjectType",
    "OctographError",
    "QueryValidationError",
    "RateLimitError",
    "ResolutionEngine",
    "RootFieldHandler",
    "ScalarType",
    "SchemaError",
    "String",
    "TypeRegistry",
    "URI",
    "UnknownFieldError",
    "UnknownTypeError",
    "UnresolvableTypeError",
    "ValueCompletionError",
    "discriminate_by_tag",
]
