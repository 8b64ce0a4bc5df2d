"""
Helpers for walking query selections and coercing input values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from graphql import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    SelectionSetNode,
    TypeNode,
    Undefined,
    VariableNode,
    value_from_ast_untyped,
)

from .errors import ArgumentValidationError, QueryValidationError, UnknownTypeError
from .registry import TypeRegistry
from .types import (
    UNSET,
    Field,
    ListOf,
    NamedType,
    NonNull,
    ObjectType,
    ScalarType,
)


def get_response_key(node: FieldNode) -> str:
    return node.alias.value if node.alias else node.name.value


def should_include_node(
    node: FieldNode | FragmentSpreadNode | InlineFragmentNode, variables: Mapping[str, Any]
) -> bool:
    """Evaluate ``@skip`` and ``@include`` on a selection."""
    for directive in node.directives or ():
        name = directive.name.value
        if name not in ("skip", "include"):
            continue
        condition = Undefined
        for argument in directive.arguments or ():
            if argument.name.value == "if":
                condition = value_from_ast_untyped(argument.value, dict(variables))
        if not isinstance(condition, bool):
            raise QueryValidationError(
                f'Directive "@{name}" argument "if" of type "Boolean!" is required'
            )
        if name == "skip" and condition:
            return False
        if name == "include" and not condition:
            return False
    return True


def does_fragment_apply(
    registry: TypeRegistry,
    type_condition: NamedTypeNode | None,
    object_type: ObjectType,
) -> bool:
    if type_condition is None:
        return True
    try:
        condition_type = registry.get_type(type_condition.name.value)
    except UnknownTypeError:
        return False
    return registry.is_possible_type(condition_type, object_type)


def collect_fields(
    registry: TypeRegistry,
    object_type: ObjectType,
    selection_set: SelectionSetNode,
    fragments: Mapping[str, FragmentDefinitionNode],
    variables: Mapping[str, Any],
    fields: dict[str, list[FieldNode]] | None = None,
    visited_fragments: set[str] | None = None,
) -> dict[str, list[FieldNode]]:
    """
    Flatten a selection set for a concrete object type.

    Fragments whose type condition does not apply to ``object_type`` are
    skipped. Fields sharing a response key are grouped in document order.

    Returns:
        Ordered mapping of response key to the field nodes selecting it
    """
    if fields is None:
        fields = {}
    if visited_fragments is None:
        visited_fragments = set()

    for selection in selection_set.selections:
        if not should_include_node(selection, variables):
            continue
        if isinstance(selection, FieldNode):
            fields.setdefault(get_response_key(selection), []).append(selection)
        elif isinstance(selection, InlineFragmentNode):
            if not does_fragment_apply(registry, selection.type_condition, object_type):
                continue
            collect_fields(
                registry,
                object_type,
                selection.selection_set,
                fragments,
                variables,
                fields,
                visited_fragments,
            )
        elif isinstance(selection, FragmentSpreadNode):
            name = selection.name.value
            if name in visited_fragments:
                continue
            visited_fragments.add(name)
            fragment = fragments.get(name)
            if fragment is None or not does_fragment_apply(
                registry, fragment.type_condition, object_type
            ):
                continue
            collect_fields(
                registry,
                object_type,
                fragment.selection_set,
                fragments,
                variables,
                fields,
                visited_fragments,
            )
    return fields


def coerce_input_value(type_: Any, value: Any, path: str) -> Any:
    """
    Coerce a wire value against an input type.

    Raises:
        ArgumentValidationError: If the value does not fit the type
    """
    if isinstance(type_, NonNull):
        if value is None:
            raise ArgumentValidationError(f"{path}: expected non-null value of type {type_}")
        return coerce_input_value(type_.of_type, value, path)

    if value is None:
        return None

    if isinstance(type_, ListOf):
        if isinstance(value, (list, tuple)):
            return [
                coerce_input_value(type_.of_type, item, f"{path}[{index}]")
                for index, item in enumerate(value)
            ]
        # Input coercion accepts a single item in place of a one-element list
        return [coerce_input_value(type_.of_type, value, path)]

    if isinstance(type_, ScalarType):
        try:
            return type_.parse(value)
        except (TypeError, ValueError) as e:
            raise ArgumentValidationError(f"{path}: {e}") from e

    raise ArgumentValidationError(f"{path}: type {type_} is not an input type")


def coerce_argument_values(
    field_name: str,
    field_def: Field,
    arguments: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Validate raw argument values against a field's argument specs.

    ``arguments`` holds already-decoded Python values; keys that are absent
    fall back to the declared default.

    Raises:
        ArgumentValidationError: On unknown or missing required arguments,
            null for a non-null argument, or values a scalar rejects
    """
    unknown = sorted(set(arguments) - set(field_def.args))
    if unknown:
        raise ArgumentValidationError(
            f'Unknown argument "{unknown[0]}" on field "{field_name}"'
        )

    coerced: dict[str, Any] = {}
    for arg_name, arg_def in field_def.args.items():
        path = f'Argument "{arg_name}" of field "{field_name}"'
        if arg_name not in arguments or arguments[arg_name] is Undefined:
            if arg_def.default_value is not UNSET:
                coerced[arg_name] = arg_def.default_value
            elif arg_def.required:
                raise ArgumentValidationError(
                    f'Field "{field_name}" argument "{arg_name}" of type '
                    f'"{arg_def.type}" is required, but it was not provided'
                )
            continue
        coerced[arg_name] = coerce_input_value(arg_def.type, arguments[arg_name], path)
    return coerced


def argument_values_from_ast(field_node: FieldNode, variables: Mapping[str, Any]) -> dict[str, Any]:
    """Decode argument literals of a field node, leaving unset variables out."""
    values: dict[str, Any] = {}
    for argument in field_node.arguments or ():
        node = argument.value
        if isinstance(node, VariableNode) and node.name.value not in variables:
            continue
        values[argument.name.value] = value_from_ast_untyped(node, dict(variables))
    return values


def type_from_ast(registry: TypeRegistry, node: TypeNode) -> Any:
    if isinstance(node, NonNullTypeNode):
        return NonNull(type_from_ast(registry, node.type))
    if isinstance(node, ListTypeNode):
        return ListOf(type_from_ast(registry, node.type))
    return registry.get_type(node.name.value)


def coerce_variable_values(
    registry: TypeRegistry,
    operation: OperationDefinitionNode,
    inputs: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """
    Coerce request variables against the operation's variable definitions.

    Raises:
        QueryValidationError: If a variable type is unknown or not an input
            type, or a provided value does not fit its declared type
    """
    inputs = inputs or {}
    coerced: dict[str, Any] = {}
    for definition in operation.variable_definitions or ():
        name = definition.variable.name.value
        try:
            var_type = type_from_ast(registry, definition.type)
        except UnknownTypeError as e:
            raise QueryValidationError(f'Variable "${name}": {e}') from e

        named: NamedType = var_type
        while isinstance(named, (NonNull, ListOf)):
            named = named.of_type
        if not isinstance(named, ScalarType):
            raise QueryValidationError(
                f'Variable "${name}" cannot be non-input type "{var_type}"'
            )

        if name not in inputs:
            if definition.default_value is not None:
                coerced[name] = value_from_ast_untyped(definition.default_value)
            elif isinstance(var_type, NonNull):
                raise QueryValidationError(
                    f'Variable "${name}" of required type "{var_type}" was not provided'
                )
            continue

        try:
            coerce_input_value(var_type, inputs[name], f'Variable "${name}"')
        except ArgumentValidationError as e:
            raise QueryValidationError(str(e)) from e
        # Wire values are kept; arguments parse them again against their own type
        coerced[name] = inputs[name]
    return coerced
