"""
Type registry holding the immutable graph of type descriptors.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..logging import get_logger
from .errors import DuplicateTypeError, SchemaError, UnknownFieldError, UnknownTypeError
from .scalars import SPECIFIED_SCALARS, String
from .types import (
    Field,
    InterfaceType,
    NamedType,
    NonNull,
    ObjectType,
    OutputType,
    ScalarType,
    _CompositeType,
    get_named_type,
    is_type_subtype_of,
)

logger = get_logger(__name__)

TYPENAME_FIELD = Field(NonNull(String), description="The name of the current Object type at runtime.")


class TypeRegistry:
    """
    Registry of every named type in a schema.

    Types are registered while the registry is open. ``close()`` evaluates
    every lazy field map, pulls in types that are only reachable through
    field or interface references, checks interface conformance and then
    freezes the registry. Once closed it is read-only and safe to share
    between concurrent requests.
    """

    def __init__(self, query_type_name: str = "Query"):
        self.query_type_name = query_type_name
        self._types: dict[str, NamedType] = {}
        self._possible_types: dict[str, tuple[ObjectType, ...]] = {}
        self._closed = False
        for scalar in SPECIFIED_SCALARS:
            self._types[scalar.name] = scalar

    @property
    def closed(self) -> bool:
        return self._closed

    def register_type(self, descriptor: NamedType) -> NamedType:
        """
        Register a type descriptor.

        Args:
            descriptor: Scalar, interface or object type to add

        Returns:
            The registered descriptor, so the call can be used inline

        Raises:
            DuplicateTypeError: If a type with the same name is already registered
            SchemaError: If the registry has already been closed
        """
        if self._closed:
            raise SchemaError(f"Cannot register '{descriptor.name}': the registry is closed")
        if not isinstance(descriptor, (ScalarType, InterfaceType, ObjectType)):
            raise SchemaError(f"Cannot register {descriptor!r}: not a named type descriptor")
        if descriptor.name in self._types:
            raise DuplicateTypeError(descriptor.name)

        self._types[descriptor.name] = descriptor
        return descriptor

    def get_type(self, name: str) -> NamedType:
        """Look up a type by name, raising UnknownTypeError if it is absent."""
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def get_field(self, type_name: str, field_name: str) -> Field:
        named = self.get_type(type_name)
        if not isinstance(named, _CompositeType):
            raise UnknownFieldError(type_name, field_name)
        if field_name == "__typename":
            return TYPENAME_FIELD
        try:
            return named.fields[field_name]
        except KeyError:
            raise UnknownFieldError(type_name, field_name) from None

    def resolve_field_type(self, type_name: str, field_name: str) -> OutputType:
        """
        Return the declared type of a field.

        Raises:
            UnknownTypeError: If no type is registered under ``type_name``
            UnknownFieldError: If the type declares no field ``field_name``
        """
        return self.get_field(type_name, field_name).type

    @property
    def query_type(self) -> ObjectType:
        query = self.get_type(self.query_type_name)
        if not isinstance(query, ObjectType):
            raise SchemaError(f"Query root '{self.query_type_name}' must be an object type")
        return query

    def possible_types(self, interface: InterfaceType | str) -> tuple[ObjectType, ...]:
        """Object types implementing an interface, in registration order."""
        name = interface if isinstance(interface, str) else interface.name
        if self._closed:
            return self._possible_types.get(name, ())
        return tuple(
            candidate
            for candidate in self._types.values()
            if isinstance(candidate, ObjectType)
            and any(iface.name == name for iface in candidate.interfaces)
        )

    def is_possible_type(self, abstract: NamedType, object_type: ObjectType) -> bool:
        if isinstance(abstract, ObjectType):
            return abstract is object_type
        if isinstance(abstract, InterfaceType):
            return object_type in self.possible_types(abstract)
        return False

    def close(self) -> "TypeRegistry":
        """
        Finish construction and freeze the registry.

        Raises:
            DuplicateTypeError: If two distinct descriptors share a name
            SchemaError: If the graph is invalid (missing Query root or an
                object type that does not conform to an interface it claims)
        """
        if self._closed:
            return self

        self._collect_reachable_types()
        _ = self.query_type

        for named in self._types.values():
            if isinstance(named, ObjectType):
                for interface in named.interfaces:
                    self._check_conformance(named, interface)

        for named in self._types.values():
            if isinstance(named, InterfaceType):
                self._possible_types[named.name] = self.possible_types(named)

        self._closed = True
        logger.debug("Type registry closed", types=len(self._types))
        return self

    def _collect_reachable_types(self) -> None:
        pending: list[NamedType] = list(self._types.values())
        while pending:
            named = pending.pop()
            if not isinstance(named, _CompositeType):
                continue
            referenced: list[NamedType] = []
            for field in named.fields.values():
                referenced.append(get_named_type(field.type))
                referenced.extend(get_named_type(arg.type) for arg in field.args.values())
            if isinstance(named, ObjectType):
                referenced.extend(named.interfaces)

            for ref in referenced:
                existing = self._types.get(ref.name)
                if existing is None:
                    self._types[ref.name] = ref
                    pending.append(ref)
                elif existing is not ref:
                    raise DuplicateTypeError(ref.name)

    def _check_conformance(self, object_type: ObjectType, interface: InterfaceType) -> None:
        for field_name, interface_field in interface.fields.items():
            object_field = object_type.fields.get(field_name)
            if object_field is None:
                raise SchemaError(
                    f"Interface field {interface.name}.{field_name} expected but "
                    f"{object_type.name} does not provide it"
                )
            if not is_type_subtype_of(object_field.type, interface_field.type):
                raise SchemaError(
                    f"Interface field {interface.name}.{field_name} expects type "
                    f"{interface_field.type} but {object_type.name}.{field_name} "
                    f"is type {object_field.type}"
                )

    def __iter__(self) -> Iterator[NamedType]:
        return iter(self._types.values())

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)
