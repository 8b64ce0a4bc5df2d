"""
Resolution engine: executes query documents against a closed type registry.

Root fields are dispatched to handlers from a HandlerRegistry. Values typed
as an interface are resolved to a concrete object type through the
interface's discriminator. Errors raised while resolving a field become a
``null`` at the nearest nullable position plus one entry in ``errors``.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Iterable, Mapping
from typing import Any

from graphql import (
    DocumentNode,
    ExecutionResult,
    FieldNode,
    FragmentDefinitionNode,
    GraphQLError,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
    execute_sync,
    located_error,
    parse,
)
from graphql.pyutils import Path

from ..logging import get_logger
from .errors import (
    DataSourceError,
    OctographError,
    QueryValidationError,
    SchemaError,
    UnresolvableTypeError,
    ValueCompletionError,
)
from .handlers import HandlerRegistry
from .introspection import build_graphql_schema
from .registry import TypeRegistry
from .selection import (
    argument_values_from_ast,
    coerce_argument_values,
    coerce_variable_values,
    collect_fields,
)
from .types import (
    Field,
    InterfaceType,
    ListOf,
    NonNull,
    ObjectType,
    ScalarType,
    type_tag,
)
from .validation import validate_document, validate_fragment

logger = get_logger(__name__)

INTROSPECTION_FIELDS = frozenset({"__schema", "__type"})


def default_field_resolver(source: Any, field_name: str) -> Any:
    """Read a field from a mapping key or an attribute of the parent value."""
    if isinstance(source, Mapping):
        return source.get(field_name)
    return getattr(source, field_name, None)


class ResolutionEngine:
    """
    Stateless executor bound to one registry and one set of root handlers.

    The registry is closed on construction. Construction fails fast with a
    SchemaError when a root field has no way to be resolved.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        handlers: HandlerRegistry,
        *,
        max_depth: int | None = None,
        introspection: bool = True,
    ):
        self.registry = registry.close()
        self.handlers = handlers
        self.max_depth = max_depth
        self.introspection = introspection
        self._graphql_schema = None

        query_fields = self.registry.query_type.fields
        for name in handlers:
            if name not in query_fields:
                raise SchemaError(
                    f"Handler registered for '{name}' but "
                    f"{self.registry.query_type_name} has no such field"
                )
        for name, field in query_fields.items():
            if field.resolve is None and name not in handlers:
                raise SchemaError(
                    f"Root field {self.registry.query_type_name}.{name} has no handler"
                )

    @property
    def graphql_schema(self):
        """graphql-core mirror of the registry, built on first use."""
        if self._graphql_schema is None:
            self._graphql_schema = build_graphql_schema(self.registry)
        return self._graphql_schema

    async def execute(
        self,
        query: str | DocumentNode,
        variables: Mapping[str, Any] | None = None,
        operation_name: str | None = None,
        context: Any = None,
    ) -> ExecutionResult:
        """
        Execute a query document.

        Document-level problems (syntax, validation, unknown operation,
        variable coercion) produce ``data: None`` and errors without a path.
        Field-level problems produce partial data.
        """
        started = time.perf_counter()
        try:
            document = parse(query) if isinstance(query, str) else query
        except GraphQLError as e:
            return ExecutionResult(data=None, errors=[e])

        validation_errors = validate_document(self.graphql_schema, document, self.max_depth)
        if validation_errors:
            return ExecutionResult(data=None, errors=validation_errors)

        try:
            operation = self._get_operation(document, operation_name)
            coerced_variables = coerce_variable_values(self.registry, operation, variables)
        except QueryValidationError as e:
            return ExecutionResult(data=None, errors=[_to_graphql_error(e)])

        run = _ExecutionRun(
            self,
            document,
            coerced_variables,
            context,
            operation=operation,
            raw_variables=variables,
        )
        data = await run.execute_operation()

        logger.debug(
            "GraphQL operation executed",
            operation=operation.name.value if operation.name else None,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            errors=len(run.errors),
        )
        return ExecutionResult(data=data, errors=run.errors or None)

    async def resolve_root_field(
        self,
        field_name: str,
        arguments: Mapping[str, Any] | None = None,
        context: Any = None,
    ) -> Any:
        """
        Validate arguments for a root field and invoke its handler.

        Args:
            field_name: Name of the field on the query root
            arguments: Raw argument values (wire form)
            context: Per-request context passed to the handler

        Returns:
            The handler's result, or None

        Raises:
            UnknownFieldError: If the query root has no such field
            ArgumentValidationError: If the arguments do not match the specs
            DataSourceError: If the handler fails
        """
        field = self.registry.get_field(self.registry.query_type_name, field_name)
        coerced = coerce_argument_values(field_name, field, arguments or {})

        handler = self.handlers.get(field_name)
        try:
            if handler is not None:
                return await handler.resolve(coerced, context)
            result = field.resolve(None, coerced, context)
            if inspect.isawaitable(result):
                result = await result
            return result
        except OctographError:
            raise
        except Exception as e:
            logger.error(
                "Root field handler failed", field=field_name, error=str(e), exc_info=True
            )
            raise DataSourceError(f"Failed to resolve '{field_name}': {e}") from e

    def resolve_interface_type(self, interface_name: str, data: Any) -> ObjectType:
        """
        Map a runtime value to the concrete object type implementing an interface.

        Raises:
            UnresolvableTypeError: If the discriminator finds no matching type
        """
        interface = self.registry.get_type(interface_name)
        if isinstance(interface, ObjectType):
            return interface
        if not isinstance(interface, InterfaceType):
            raise SchemaError(f"'{interface_name}' is not an interface type")

        possible = self.registry.possible_types(interface)
        resolved = interface.resolve_type(data, possible)
        if isinstance(resolved, str):
            resolved = next((t for t in possible if t.name == resolved), None)
        if resolved is None or resolved not in possible:
            raise UnresolvableTypeError(interface_name, type_tag(data))
        return resolved

    async def serialize_field(
        self,
        object_type: ObjectType | str,
        field_name: str,
        data: Any,
        selection: str | None = None,
        context: Any = None,
    ) -> ExecutionResult:
        """
        Resolve and serialize one field of ``data`` viewed as ``object_type``.

        Args:
            object_type: Object type (or its name) describing ``data``
            field_name: Field to serialize
            data: Parent value holding the field
            selection: Selection set for composite fields, e.g. ``"{ id name }"``
            context: Per-request context for field resolvers

        Returns:
            ExecutionResult whose data is ``{field_name: value}``, or None if a
            non-null violation reached the top
        """
        if isinstance(object_type, str):
            object_type = self.registry.get_type(object_type)
        document = parse(
            f"fragment SerializedField on {object_type.name} {{ {field_name} {selection or ''} }}"
        )
        validation_errors = validate_fragment(self.graphql_schema, document)
        if validation_errors:
            return ExecutionResult(data=None, errors=validation_errors)
        field_node = document.definitions[0].selection_set.selections[0]

        run = _ExecutionRun(self, document, {}, context)
        path = Path(None, field_name, object_type.name)
        try:
            value = await run.resolve_field(object_type, data, [field_node], path)
            result: dict[str, Any] | None = {field_name: value}
        except GraphQLError as e:
            run.errors.append(e)
            result = None
        return ExecutionResult(data=result, errors=run.errors or None)

    def _get_operation(
        self, document: DocumentNode, operation_name: str | None
    ) -> OperationDefinitionNode:
        operations = [
            definition
            for definition in document.definitions
            if isinstance(definition, OperationDefinitionNode)
        ]
        if not operations:
            raise QueryValidationError("Must provide an operation.")

        if operation_name is None:
            if len(operations) > 1:
                raise QueryValidationError(
                    "Must provide operation name if query contains multiple operations."
                )
            operation = operations[0]
        else:
            operation = next(
                (op for op in operations if op.name and op.name.value == operation_name), None
            )
            if operation is None:
                raise QueryValidationError(f"Unknown operation named '{operation_name}'.")

        if operation.operation is not OperationType.QUERY:
            raise QueryValidationError(
                f"Schema is not configured to execute {operation.operation.value} operation."
            )
        return operation


class _ExecutionRun:
    """State of one request: fragments, variables, context and collected errors."""

    def __init__(
        self,
        engine: ResolutionEngine,
        document: DocumentNode,
        variables: dict[str, Any],
        context: Any,
        operation: OperationDefinitionNode | None = None,
        raw_variables: Mapping[str, Any] | None = None,
    ):
        self.engine = engine
        self.registry = engine.registry
        self.document = document
        self.operation = operation
        self.variables = variables
        self.raw_variables = raw_variables or {}
        self.context = context
        self.fragments: dict[str, FragmentDefinitionNode] = {
            definition.name.value: definition
            for definition in document.definitions
            if isinstance(definition, FragmentDefinitionNode)
        }
        self.errors: list[GraphQLError] = []

    async def execute_operation(self) -> dict[str, Any] | None:
        query_type = self.registry.query_type
        fields = collect_fields(
            self.registry, query_type, self.operation.selection_set, self.fragments, self.variables
        )
        try:
            return await self.execute_fields(query_type, None, fields, None)
        except GraphQLError as e:
            # Non-null violation reached the root
            self.errors.append(e)
            return None

    async def execute_fields(
        self,
        parent_type: ObjectType,
        source: Any,
        fields: dict[str, list[FieldNode]],
        path: Path | None,
    ) -> dict[str, Any]:
        """Resolve sibling fields concurrently, keeping selection order."""
        keys = list(fields)
        results = await asyncio.gather(
            *(
                self.resolve_field(parent_type, source, fields[key], Path(path, key, parent_type.name))
                for key in keys
            ),
            return_exceptions=True,
        )
        _raise_first_failure(results)
        return dict(zip(keys, results))

    async def resolve_field(
        self,
        parent_type: ObjectType,
        source: Any,
        field_nodes: list[FieldNode],
        path: Path,
    ) -> Any:
        field_node = field_nodes[0]
        field_name = field_node.name.value

        if field_name == "__typename":
            return parent_type.name
        if field_name in INTROSPECTION_FIELDS and parent_type is self.registry.query_type:
            return self._resolve_introspection(field_node, path)

        field = self.registry.get_field(parent_type.name, field_name)
        try:
            raw_arguments = argument_values_from_ast(field_node, self.variables)
            if source is None and parent_type is self.registry.query_type:
                result = await self.engine.resolve_root_field(
                    field_name, raw_arguments, self.context
                )
            else:
                result = await self._resolve_nested(parent_type, field, field_name, source, raw_arguments)
            return await self.complete_value(
                field.type, field_nodes, path, result, f"{parent_type.name}.{field_name}"
            )
        except Exception as raw_error:
            return self._handle_field_error(raw_error, field.type, field_nodes, path)

    async def _resolve_nested(
        self,
        parent_type: ObjectType,
        field: Field,
        field_name: str,
        source: Any,
        raw_arguments: dict[str, Any],
    ) -> Any:
        if field.resolve is None:
            if raw_arguments:
                coerce_argument_values(field_name, field, raw_arguments)
            return default_field_resolver(source, field_name)

        arguments = coerce_argument_values(field_name, field, raw_arguments)
        result = field.resolve(source, arguments, self.context)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _handle_field_error(
        self, raw_error: Exception, return_type: Any, field_nodes: list[FieldNode], path: Path
    ) -> None:
        error = located_error(raw_error, field_nodes, path.as_list())
        if not isinstance(raw_error, (OctographError, GraphQLError)):
            logger.error(
                "Unexpected error while resolving field",
                path=path.as_list(),
                error=str(raw_error),
                exc_info=raw_error,
            )
        if isinstance(return_type, NonNull):
            raise error
        self.errors.append(error)
        return None

    async def complete_value(
        self,
        return_type: Any,
        field_nodes: list[FieldNode],
        path: Path,
        result: Any,
        field_label: str,
    ) -> Any:
        if isinstance(return_type, NonNull):
            completed = await self.complete_value(
                return_type.of_type, field_nodes, path, result, field_label
            )
            if completed is None:
                raise ValueCompletionError(
                    f"Cannot return null for non-nullable field {field_label}."
                )
            return completed

        if result is None:
            return None

        if isinstance(return_type, ListOf):
            return await self._complete_list_value(
                return_type, field_nodes, path, result, field_label
            )

        if isinstance(return_type, ScalarType):
            try:
                return return_type.serialize(result)
            except (TypeError, ValueError) as e:
                raise ValueCompletionError(
                    f"Expected a value of type '{return_type.name}' for {field_label}: {e}"
                ) from e

        if isinstance(return_type, InterfaceType):
            object_type = self.engine.resolve_interface_type(return_type.name, result)
            return await self._complete_object_value(object_type, field_nodes, path, result)

        if isinstance(return_type, ObjectType):
            return await self._complete_object_value(return_type, field_nodes, path, result)

        raise TypeError(f"Cannot complete value of unexpected output type: {return_type}")

    async def _complete_list_value(
        self,
        return_type: ListOf,
        field_nodes: list[FieldNode],
        path: Path,
        result: Any,
        field_label: str,
    ) -> list[Any]:
        if isinstance(result, (str, bytes, Mapping)) or not isinstance(result, Iterable):
            raise ValueCompletionError(
                f"Expected Iterable, but did not find one for field '{field_label}'."
            )

        item_type = return_type.of_type

        async def complete_item(index: int, item: Any) -> Any:
            item_path = path.add_key(index, None)
            try:
                return await self.complete_value(item_type, field_nodes, item_path, item, field_label)
            except Exception as raw_error:
                return self._handle_field_error(raw_error, item_type, field_nodes, item_path)

        completed = await asyncio.gather(
            *(complete_item(index, item) for index, item in enumerate(result)),
            return_exceptions=True,
        )
        _raise_first_failure(completed)
        return list(completed)

    async def _complete_object_value(
        self,
        object_type: ObjectType,
        field_nodes: list[FieldNode],
        path: Path,
        result: Any,
    ) -> dict[str, Any]:
        sub_fields: dict[str, list[FieldNode]] = {}
        for node in field_nodes:
            if node.selection_set is not None:
                collect_fields(
                    self.registry,
                    object_type,
                    node.selection_set,
                    self.fragments,
                    self.variables,
                    sub_fields,
                )
        return await self.execute_fields(object_type, result, sub_fields, path)

    def _resolve_introspection(self, field_node: FieldNode, path: Path) -> Any:
        if not self.engine.introspection:
            error = GraphQLError(
                "GraphQL introspection has been disabled.", nodes=[field_node], path=path.as_list()
            )
            self.errors.append(error)
            return None

        # Run the single introspection field through graphql-core against the mirror
        document = DocumentNode(
            definitions=[
                OperationDefinitionNode(
                    operation=OperationType.QUERY,
                    selection_set=SelectionSetNode(selections=[field_node]),
                    variable_definitions=(
                        self.operation.variable_definitions if self.operation else []
                    ),
                    directives=[],
                ),
                *self.fragments.values(),
            ]
        )
        result = execute_sync(
            self.engine.graphql_schema, document, variable_values=self.raw_variables
        )
        key = path.key
        for error in result.errors or ():
            self.errors.append(
                GraphQLError(
                    error.message,
                    nodes=error.nodes,
                    path=[*path.as_list()[:-1], *(error.path or [key])],
                    original_error=error.original_error,
                )
            )
        return (result.data or {}).get(key)


def _raise_first_failure(results: list[Any]) -> None:
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
    for result in results:
        if isinstance(result, Exception):
            raise result


def _to_graphql_error(error: OctographError) -> GraphQLError:
    return GraphQLError(str(error), original_error=error)
