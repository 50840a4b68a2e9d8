"""C# type inference for receiver expressions.

This module provides the TypeInferrer class that infers the static type of
the expressions a member is accessed on: locals, parameters, fields,
properties, object creation, casts, and the NSubstitute calls that create or
wrap substitutes.
"""

from __future__ import annotations

import logging

from autoargs.core.models import TypeInfo, TypeKind
from autoargs.semantics.ast_utils import CSharpAstUtils
from autoargs.semantics.local_scope import LocalScope
from autoargs.semantics.symbols import FileContext, SymbolTable
from autoargs.syntax.tree import SyntaxNode

logger = logging.getLogger(__name__)

# Substitute.For<T>() and friends return T.
SUBSTITUTE_FACTORY_TYPES = ("Substitute", "NSubstitute.Substitute")
SUBSTITUTE_FACTORY_METHODS = ("For", "ForPartsOf", "ForTypeForwardingTo")

# sub.Received() and friends return the substitute itself.
RECEIVER_PRESERVING_METHODS = (
    "Received",
    "DidNotReceive",
    "ReceivedWithAnyArgs",
    "DidNotReceiveWithAnyArgs",
)

_PREDEFINED_TYPES: dict[str, tuple[str, TypeKind]] = {
    "bool": ("System.Boolean", TypeKind.STRUCT),
    "byte": ("System.Byte", TypeKind.STRUCT),
    "sbyte": ("System.SByte", TypeKind.STRUCT),
    "char": ("System.Char", TypeKind.STRUCT),
    "decimal": ("System.Decimal", TypeKind.STRUCT),
    "double": ("System.Double", TypeKind.STRUCT),
    "float": ("System.Single", TypeKind.STRUCT),
    "int": ("System.Int32", TypeKind.STRUCT),
    "uint": ("System.UInt32", TypeKind.STRUCT),
    "nint": ("System.IntPtr", TypeKind.STRUCT),
    "nuint": ("System.UIntPtr", TypeKind.STRUCT),
    "long": ("System.Int64", TypeKind.STRUCT),
    "ulong": ("System.UInt64", TypeKind.STRUCT),
    "short": ("System.Int16", TypeKind.STRUCT),
    "ushort": ("System.UInt16", TypeKind.STRUCT),
    "object": ("System.Object", TypeKind.CLASS),
    "string": ("System.String", TypeKind.CLASS),
    "dynamic": ("System.Object", TypeKind.CLASS),
}


class TypeInferrer:
    """Infers static types of C# expressions.

    Used by the semantic model to answer ``type_of`` queries for the
    receiver of a member access.
    """

    def __init__(
        self,
        symbol_table: SymbolTable,
        file_context: FileContext,
        local_scope: LocalScope,
        enclosing_type: str | None = None,
    ) -> None:
        """Initialize the type inferrer.

        Args:
            symbol_table: Symbol table containing the project's declarations.
            file_context: Namespace and using information for name resolution.
            local_scope: Locals and parameters visible at the expression.
            enclosing_type: Qualified name of the type containing the expression.
        """
        self._symbol_table = symbol_table
        self._file_context = file_context
        self._local_scope = local_scope
        self._enclosing_type = enclosing_type
        self._visiting: set[str] = set()

    def infer_type(self, node: SyntaxNode) -> TypeInfo | None:
        """Infer the type of an expression node.

        Dispatches to specific inference methods based on node kind.

        Args:
            node: The expression node.

        Returns:
            The inferred TypeInfo, or None if the type cannot be determined.
        """
        kind = node.kind

        if kind == "identifier":
            return self._infer_identifier(node)

        if kind in ("this", "this_expression") or (node.is_token and node.text == "this"):
            return self.infer_type_of_this()

        if kind == "member_access_expression":
            return self._infer_member_access(node)

        if kind == "invocation_expression":
            return self._infer_invocation(node)

        if kind in ("object_creation_expression", "cast_expression"):
            type_node = node.child_by_field_name("type")
            return self.resolve_type_text(type_node.text) if type_node else None

        if kind == "as_expression":
            right = node.child_by_field_name("right")
            return self.resolve_type_text(right.text) if right else None

        if kind == "parenthesized_expression":
            named = node.named_children
            return self.infer_type(named[0]) if named else None

        logger.debug(f"Unknown expression type for inference: {kind}")
        return None

    def resolve_type_text(
        self, type_text: str, context: FileContext | None = None
    ) -> TypeInfo | None:
        """Turn a type as written in source into a TypeInfo.

        Types that are not declared in the project come back with
        ``TypeKind.ERROR``.
        """
        context = context or self._file_context
        text = CSharpAstUtils.normalize_type_text(type_text)
        if not text or text == "var":
            return None
        text = text.removesuffix("?")

        if text in _PREDEFINED_TYPES:
            qualified, kind = _PREDEFINED_TYPES[text]
            return TypeInfo(name=text, qualified_name=qualified, kind=kind, namespace="System")

        if text.endswith("]"):
            return TypeInfo(
                name=text, qualified_name="System.Array", kind=TypeKind.CLASS, namespace="System"
            )

        if text.startswith("("):
            return TypeInfo(
                name=text, qualified_name="System.ValueTuple", kind=TypeKind.STRUCT, namespace="System"
            )

        base, args = CSharpAstUtils.split_type_arguments(text)
        qualified = self._symbol_table.resolve_type(base, context)
        if qualified is None:
            return TypeInfo(name=text, qualified_name=base, kind=TypeKind.ERROR, type_arguments=args)

        symbol = self._symbol_table.get_type(qualified)
        assert symbol is not None
        return TypeInfo(
            name=text,
            qualified_name=qualified,
            kind=symbol.kind,
            namespace=symbol.namespace,
            type_arguments=args,
        )

    def infer_type_of_this(self) -> TypeInfo | None:
        if self._enclosing_type is None:
            return None
        symbol = self._symbol_table.get_type(self._enclosing_type)
        if symbol is None:
            return None
        return TypeInfo(
            name=symbol.name,
            qualified_name=symbol.qualified_name,
            kind=symbol.kind,
            namespace=symbol.namespace,
            type_arguments=list(symbol.type_parameters),
        )

    def _infer_identifier(self, node: SyntaxNode) -> TypeInfo | None:
        """Infer type from local variables, parameters, then members of the enclosing type."""
        name = node.text
        variable = self._local_scope.get(name)
        if variable is not None:
            if not variable.is_implicitly_typed:
                return self.resolve_type_text(variable.type_text or "")
            if variable.initializer is None or name in self._visiting:
                return None
            self._visiting.add(name)
            try:
                return self.infer_type(variable.initializer)
            finally:
                self._visiting.discard(name)

        enclosing = self.infer_type_of_this()
        if enclosing is None:
            return None
        return self._member_type(enclosing, name)

    def _member_type(self, owner: TypeInfo, member_name: str) -> TypeInfo | None:
        found = self._symbol_table.find_member_type(
            owner.qualified_name, owner.type_arguments, member_name
        )
        if found is None:
            return None
        type_text, declared_in = found
        return self.resolve_type_text(type_text, declared_in.file_context)

    def _infer_member_access(self, node: SyntaxNode) -> TypeInfo | None:
        target = node.child_by_field_name("expression")
        name = node.child_by_field_name("name")
        if target is None or name is None:
            return None
        owner = self.infer_type(target)
        if owner is None or owner.kind == TypeKind.ERROR:
            return None
        return self._member_type(owner, name.text)

    def _infer_invocation(self, node: SyntaxNode) -> TypeInfo | None:
        """Infer the return type of a call."""
        function = node.child_by_field_name("function")
        if function is None:
            return None

        if function.kind == "member_access_expression":
            target = function.child_by_field_name("expression")
            name = function.child_by_field_name("name")
            if target is None or name is None:
                return None
            method_name, type_args = split_simple_name(name)

            if method_name in SUBSTITUTE_FACTORY_METHODS and target.text in SUBSTITUTE_FACTORY_TYPES:
                return self.resolve_type_text(type_args[0]) if type_args else None

            if method_name in RECEIVER_PRESERVING_METHODS:
                return self.infer_type(target)

            owner = self.infer_type(target)
        elif function.kind in ("identifier", "generic_name"):
            method_name, _ = split_simple_name(function)
            owner = self.infer_type_of_this()
        else:
            return None

        if owner is None or owner.kind == TypeKind.ERROR:
            return None
        return self._return_type(owner, method_name, node)

    def _return_type(
        self, owner: TypeInfo, method_name: str, invocation: SyntaxNode
    ) -> TypeInfo | None:
        arguments = invocation.child_by_field_name("arguments")
        argument_count = (
            sum(1 for c in arguments.children if c.kind == "argument") if arguments else 0
        )
        matches = [
            m
            for m in self._symbol_table.find_members(
                owner.qualified_name, owner.type_arguments, method_name
            )
            if m.method.accepts_argument_count(argument_count)
        ]
        return_types = {m.method.return_type for m in matches}
        if len(return_types) != 1 or None in return_types:
            return None
        match = matches[0]
        assert match.method.return_type is not None
        return self.resolve_type_text(match.method.return_type, match.declared_in.file_context)


def split_simple_name(name: SyntaxNode) -> tuple[str, list[str]]:
    """Split ``Name`` or ``Name<A, B>`` into its identifier and type argument texts."""
    if name.kind != "generic_name":
        return name.text, []
    identifier = ""
    type_args: list[str] = []
    for child in name.children:
        if child.kind == "identifier" and not identifier:
            identifier = child.text
        elif child.kind == "type_argument_list":
            type_args = [CSharpAstUtils.get_type_text(t) for t in child.named_children]
    return identifier, type_args
