"""
graphql-core mirror of a type registry.

The mirror carries no resolvers. It answers introspection queries
(``__schema`` / ``__type``) for the explorer, prints the schema as SDL and
lets the startup check run graphql-core's own schema validation.
"""

from __future__ import annotations

from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLFloat,
    GraphQLID,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
    Undefined,
    print_schema,
)

from .errors import SchemaError
from .registry import TypeRegistry
from .types import (
    UNSET,
    Field,
    InterfaceType,
    ListOf,
    NamedType,
    NonNull,
    ObjectType,
    ScalarType,
)

_BUILTIN_SCALARS: dict[str, GraphQLScalarType] = {
    "String": GraphQLString,
    "Int": GraphQLInt,
    "Float": GraphQLFloat,
    "Boolean": GraphQLBoolean,
    "ID": GraphQLID,
}


class _SchemaMirror:
    def __init__(self, registry: TypeRegistry):
        self.registry = registry
        self._named: dict[str, GraphQLNamedType] = {}

    def named(self, named: NamedType) -> GraphQLNamedType:
        existing = self._named.get(named.name)
        if existing is not None:
            return existing

        mirrored: GraphQLNamedType
        if isinstance(named, ScalarType):
            mirrored = _BUILTIN_SCALARS.get(named.name) or GraphQLScalarType(
                named.name,
                serialize=named.serialize,
                parse_value=named.parse,
                description=named.description,
                specified_by_url=named.specified_by_url,
            )
        elif isinstance(named, InterfaceType):
            mirrored = GraphQLInterfaceType(
                named.name,
                fields=lambda: self.fields(named),
                description=named.description,
            )
        elif isinstance(named, ObjectType):
            mirrored = GraphQLObjectType(
                named.name,
                fields=lambda: self.fields(named),
                interfaces=lambda: [self.named(iface) for iface in named.interfaces],
                description=named.description,
            )
        else:
            raise SchemaError(f"Cannot mirror type {named!r}")

        self._named[named.name] = mirrored
        return mirrored

    def wrap(self, type_: Any) -> Any:
        if isinstance(type_, NonNull):
            return GraphQLNonNull(self.wrap(type_.of_type))
        if isinstance(type_, ListOf):
            return GraphQLList(self.wrap(type_.of_type))
        return self.named(type_)

    def fields(self, composite: InterfaceType | ObjectType) -> dict[str, GraphQLField]:
        return {name: self.field(field) for name, field in composite.fields.items()}

    def field(self, field: Field) -> GraphQLField:
        return GraphQLField(
            self.wrap(field.type),
            args={
                name: GraphQLArgument(
                    self.wrap(arg.type),
                    default_value=Undefined if arg.default_value is UNSET else arg.default_value,
                    description=arg.description,
                )
                for name, arg in field.args.items()
            },
            description=field.description,
            deprecation_reason=field.deprecation_reason,
        )

    def build(self) -> GraphQLSchema:
        query = self.named(self.registry.query_type)
        types = [self.named(named) for named in self.registry]
        return GraphQLSchema(query=query, types=types)


def build_graphql_schema(registry: TypeRegistry) -> GraphQLSchema:
    """Mirror a closed registry as a graphql-core schema."""
    if not registry.closed:
        raise SchemaError("The registry must be closed before it can be mirrored")
    return _SchemaMirror(registry).build()


def print_sdl(registry: TypeRegistry) -> str:
    """Render the registry as GraphQL SDL."""
    return print_schema(build_graphql_schema(registry))
