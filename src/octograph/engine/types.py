"""
Type descriptors for the schema layer.

Named types (scalars, interfaces, objects) are plain immutable descriptors.
Field maps and interface lists may be given as thunks so that a type can
refer to itself, or to a type defined later in the module, before its own
definition has completed::

    topic_type = ObjectType(
        "Topic",
        fields=lambda: {
            "name": Field(NonNull(String)),
            "relatedTopics": Field(NonNull(ListOf(NonNull(topic_type)))),
        },
        interfaces=lambda: [node_interface],
    )

Thunks are evaluated on first access and cached.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias, TypeVar, Union

T = TypeVar("T")

Thunk: TypeAlias = Union[Callable[[], T], T]

# (parent, arguments, context) -> value
FieldResolver: TypeAlias = Callable[[Any, dict[str, Any], Any], Union[Any, Awaitable[Any]]]

# (data, possible object types) -> concrete type, or None when unresolvable
Discriminator: TypeAlias = Callable[[Any, Sequence["ObjectType"]], Union["ObjectType", None]]


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _resolve_thunk(thunk: Thunk[T]) -> T:
    return thunk() if callable(thunk) else thunk


class NamedType:
    """Base class for every type that carries a name in the schema."""

    kind = "NAMED"

    def __init__(self, name: str, description: str | None = None):
        if not name or not name.replace("_", "a").isalnum() or name[0].isdigit():
            raise ValueError(f"Invalid type name: {name!r}")
        self.name = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class ScalarType(NamedType):
    """Leaf type converting between internal values and their wire form.

    ``serialize`` maps an internal value to the JSON-compatible wire value.
    ``parse`` maps a wire value (from a variable or literal) back to the
    internal value and raises ``ValueError`` or ``TypeError`` to reject it.
    """

    kind = "SCALAR"

    def __init__(
        self,
        name: str,
        serialize: Callable[[Any], Any],
        parse: Callable[[Any], Any],
        description: str | None = None,
        specified_by_url: str | None = None,
    ):
        super().__init__(name, description)
        self._serialize = serialize
        self._parse = parse
        self.specified_by_url = specified_by_url

    def serialize(self, value: Any) -> Any:
        return self._serialize(value)

    def parse(self, value: Any) -> Any:
        return self._parse(value)


@dataclass(frozen=True)
class Argument:
    """Argument accepted by a field."""

    type: "InputType"
    default_value: Any = UNSET
    description: str | None = None

    @property
    def required(self) -> bool:
        return isinstance(self.type, NonNull) and self.default_value is UNSET


@dataclass(frozen=True)
class Field:
    """Field declared on an object or interface type."""

    type: "OutputType"
    resolve: FieldResolver | None = None
    args: Mapping[str, Argument] = field(default_factory=dict)
    description: str | None = None
    deprecation_reason: str | None = None


class _CompositeType(NamedType):
    def __init__(
        self,
        name: str,
        fields: Thunk[Mapping[str, Field | "OutputType"]],
        description: str | None = None,
    ):
        super().__init__(name, description)
        self._fields_thunk = fields
        self._fields: Mapping[str, Field] | None = None

    @property
    def fields(self) -> Mapping[str, Field]:
        """Field map, evaluated from the thunk on first access."""
        if self._fields is None:
            raw = _resolve_thunk(self._fields_thunk)
            if not isinstance(raw, Mapping):
                raise TypeError(f"{self.name} fields must be a mapping or a thunk returning one")
            normalized: dict[str, Field] = {}
            for field_name, entry in raw.items():
                normalized[field_name] = entry if isinstance(entry, Field) else Field(entry)
            self._fields = MappingProxyType(normalized)
        return self._fields


class InterfaceType(_CompositeType):
    """Named field contract that object types may conform to."""

    kind = "INTERFACE"

    def __init__(
        self,
        name: str,
        fields: Thunk[Mapping[str, Field | "OutputType"]],
        resolve_type: Discriminator | None = None,
        description: str | None = None,
    ):
        super().__init__(name, fields, description)
        self.resolve_type: Discriminator = resolve_type or discriminate_by_tag()


class ObjectType(_CompositeType):
    """Concrete type with its own field set."""

    kind = "OBJECT"

    def __init__(
        self,
        name: str,
        fields: Thunk[Mapping[str, Field | "OutputType"]],
        interfaces: Thunk[Sequence[InterfaceType]] = (),
        description: str | None = None,
    ):
        super().__init__(name, fields, description)
        self._interfaces_thunk = interfaces
        self._interfaces: tuple[InterfaceType, ...] | None = None

    @property
    def interfaces(self) -> tuple[InterfaceType, ...]:
        if self._interfaces is None:
            self._interfaces = tuple(_resolve_thunk(self._interfaces_thunk))
        return self._interfaces

    def implements(self, interface: InterfaceType) -> bool:
        return interface in self.interfaces


@dataclass(frozen=True)
class NonNull:
    """Wrapper marking a position that may never hold ``null``."""

    of_type: "NamedType | ListOf"

    def __post_init__(self) -> None:
        if isinstance(self.of_type, NonNull):
            raise TypeError(f"Cannot wrap {self.of_type} in NonNull twice")

    def __str__(self) -> str:
        return f"{self.of_type}!"


@dataclass(frozen=True)
class ListOf:
    """Wrapper for an ordered list of values of the inner type."""

    of_type: "NamedType | NonNull | ListOf"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


OutputType: TypeAlias = Union[ScalarType, InterfaceType, ObjectType, NonNull, ListOf]
InputType: TypeAlias = Union[ScalarType, NonNull, ListOf]


def get_named_type(type_: Any) -> NamedType:
    """Strip every NonNull/ListOf wrapper from a type."""
    while isinstance(type_, (NonNull, ListOf)):
        type_ = type_.of_type
    return type_


def is_type_subtype_of(maybe_subtype: Any, super_type: Any) -> bool:
    """Return True if ``maybe_subtype`` may appear where ``super_type`` is declared.

    A non-null type is narrower than its nullable counterpart, list element
    types compare covariantly and an object type is narrower than every
    interface it implements.
    """
    if maybe_subtype is super_type or maybe_subtype == super_type:
        return True

    if isinstance(super_type, NonNull):
        if isinstance(maybe_subtype, NonNull):
            return is_type_subtype_of(maybe_subtype.of_type, super_type.of_type)
        return False
    if isinstance(maybe_subtype, NonNull):
        return is_type_subtype_of(maybe_subtype.of_type, super_type)

    if isinstance(super_type, ListOf):
        if isinstance(maybe_subtype, ListOf):
            return is_type_subtype_of(maybe_subtype.of_type, super_type.of_type)
        return False
    if isinstance(maybe_subtype, ListOf):
        return False

    return (
        isinstance(super_type, InterfaceType)
        and isinstance(maybe_subtype, ObjectType)
        and maybe_subtype.implements(super_type)
    )


def type_tag(data: Any, key: str = "type") -> Any:
    """Read the discriminator tag from a mapping or an object attribute."""
    if isinstance(data, Mapping):
        return data.get(key)
    return getattr(data, key, None)


def discriminate_by_tag(key: str = "type") -> Discriminator:
    """Build a discriminator matching ``data[key]`` against object type names.

    Matching is exact string equality; anything else resolves to ``None``.
    """

    def resolve(data: Any, possible_types: Sequence[ObjectType]) -> ObjectType | None:
        tag = type_tag(data, key)
        if not isinstance(tag, str):
            return None
        for object_type in possible_types:
            if object_type.name == tag:
                return object_type
        return None

    return resolve
