"""
Document validation run before a request executes.

Documents are checked by graphql-core's standard rules against the
registry's graphql-core mirror, plus a selection depth limit. Argument
values are left to per-field coercion so that a bad argument nulls only
the field that received it.
"""

from __future__ import annotations

from collections.abc import Collection

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentSpreadNode,
    GraphQLError,
    GraphQLSchema,
    InlineFragmentNode,
    NoUnusedFragmentsRule,
    OperationDefinitionNode,
    ProvidedRequiredArgumentsRule,
    SelectionSetNode,
    ValidationRule,
    ValuesOfCorrectTypeRule,
    specified_rules,
    validate,
)
from graphql.language import SKIP
from graphql.validation.rules.provided_required_arguments import (
    ProvidedRequiredArgumentsOnDirectivesRule,
)

# Field arguments are coerced per field and fail as ArgumentValidationError
_FIELD_ARGUMENT_RULES = (ProvidedRequiredArgumentsRule, ValuesOfCorrectTypeRule)

DOCUMENT_RULES: tuple[type[ValidationRule], ...] = (
    *(rule for rule in specified_rules if rule not in _FIELD_ARGUMENT_RULES),
    ProvidedRequiredArgumentsOnDirectivesRule,
)


def max_depth_rule(max_depth: int) -> type[ValidationRule]:
    """Build a rule rejecting composite selections nested ``max_depth`` deep.

    Root fields sit at depth 1 and fragments add no depth. Introspection
    fields are exempt.
    """

    class MaxDepthRule(ValidationRule):
        def enter_operation_definition(self, node: OperationDefinitionNode, *_args):
            offending = self._deepest(node.selection_set, 1, frozenset())
            if offending is not None:
                self.report_error(
                    GraphQLError(
                        f"Query exceeds the maximum selection depth of {max_depth}.", offending
                    )
                )
            return SKIP

        def _deepest(
            self, selection_set: SelectionSetNode, depth: int, spread: frozenset[str]
        ) -> FieldNode | None:
            for selection in selection_set.selections:
                if isinstance(selection, FieldNode):
                    if selection.selection_set is None or selection.name.value.startswith("__"):
                        continue
                    if depth >= max_depth:
                        return selection
                    found = self._deepest(selection.selection_set, depth + 1, spread)
                elif isinstance(selection, InlineFragmentNode):
                    found = self._deepest(selection.selection_set, depth, spread)
                elif isinstance(selection, FragmentSpreadNode):
                    name = selection.name.value
                    fragment = self.context.get_fragment(name)
                    # Cycles are reported by NoFragmentCyclesRule
                    if fragment is None or name in spread:
                        continue
                    found = self._deepest(fragment.selection_set, depth, spread | {name})
                else:
                    continue
                if found is not None:
                    return found
            return None

    return MaxDepthRule


def validate_document(
    schema: GraphQLSchema,
    document: DocumentNode,
    max_depth: int | None = None,
    rules: Collection[type[ValidationRule]] = DOCUMENT_RULES,
) -> list[GraphQLError]:
    """Return the validation errors for ``document``; empty when it can execute."""
    rules = list(rules)
    if max_depth is not None:
        rules.append(max_depth_rule(max_depth))
    return validate(schema, document, rules)


def validate_fragment(schema: GraphQLSchema, document: DocumentNode) -> list[GraphQLError]:
    """Validate a document holding a single fragment definition and no operation."""
    return validate_document(
        schema,
        document,
        rules=[rule for rule in DOCUMENT_RULES if rule is not NoUnusedFragmentsRule],
    )
