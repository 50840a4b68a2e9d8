"""Per-document semantic model.

SemanticModel answers the questions the refactoring asks about one
document: the static type of an expression, what an invocation binds to,
and which external libraries the project references.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from autoargs.core.models import (
    Ambiguous,
    CandidateReason,
    Resolved,
    ResolutionResult,
    TypeInfo,
    TypeKind,
    Unresolved,
)
from autoargs.semantics.ast_utils import CSharpAstUtils
from autoargs.semantics.local_scope import LocalScope
from autoargs.semantics.symbols import FileContext, SymbolTable
from autoargs.semantics.type_inferrer import TypeInferrer, split_simple_name
from autoargs.syntax.tree import InvocationExpression, SyntaxNode

logger = logging.getLogger(__name__)


class SemanticModel:
    """Type-resolution service for a single document.

    Args:
        root: Compilation unit of the document.
        symbol_table: Declarations of every document in the project.
        references: Display names of the project's external dependencies.
    """

    def __init__(
        self,
        root: SyntaxNode,
        symbol_table: SymbolTable,
        references: Sequence[str] = (),
    ) -> None:
        self.root = root
        self.symbol_table = symbol_table
        self._references = tuple(references)
        self._usings, self._aliases = CSharpAstUtils.extract_usings(root)

    def external_dependency_names(self) -> list[str]:
        return list(self._references)

    def type_of(self, expression: SyntaxNode) -> TypeInfo | None:
        """Static type of ``expression``, or None when it cannot be inferred."""
        return self._inferrer_for(expression).infer_type(expression)

    def resolve_call_symbol(self, invocation: InvocationExpression) -> ResolutionResult:
        """Bind an invocation to the method it calls.

        A method applies when the invocation's argument count fits its
        parameter list. Exactly one applicable method resolves; several are
        ambiguous; none applicable among same-name members is an overload
        resolution failure carrying all of them as candidates.
        """
        function = invocation.expression
        if function is None:
            return Unresolved("invocation has no callee")

        inferrer = self._inferrer_for(invocation)
        if function.kind == "member_access_expression":
            target = function.child_by_field_name("expression")
            name = function.child_by_field_name("name")
            if target is None or name is None:
                return Unresolved("incomplete member access")
            owner = inferrer.infer_type(target)
        elif function.kind in ("identifier", "generic_name"):
            name = function
            owner = inferrer.infer_type_of_this()
        else:
            return Unresolved(f"unsupported callee {function.kind}")

        if owner is None or owner.kind == TypeKind.ERROR:
            return Unresolved("receiver type is unknown")

        method_name, type_args = split_simple_name(name)
        methods = self.symbol_table.find_methods(
            owner.qualified_name, owner.type_arguments, method_name
        )
        if type_args:
            methods = [m for m in methods if len(m.type_parameters) == len(type_args)]
        if not methods:
            return Unresolved(f"no member named {method_name} on {owner.name}")

        argument_list = invocation.argument_list
        argument_count = len(argument_list.arguments) if argument_list is not None else 0
        applicable = [m for m in methods if m.accepts_argument_count(argument_count)]

        if len(applicable) == 1:
            return Resolved(applicable[0])
        if applicable:
            return Ambiguous(CandidateReason.AMBIGUOUS, tuple(applicable))
        logger.debug(
            f"No overload of {owner.name}.{method_name} takes {argument_count} arguments"
        )
        return Ambiguous(CandidateReason.OVERLOAD_RESOLUTION_FAILURE, tuple(methods))

    def _inferrer_for(self, node: SyntaxNode) -> TypeInferrer:
        context = FileContext(
            namespace=CSharpAstUtils.get_namespace(node),
            usings=self._usings,
            aliases=self._aliases,
        )
        return TypeInferrer(
            self.symbol_table,
            context,
            LocalScope.build(node),
            CSharpAstUtils.get_enclosing_type_name(node),
        )
