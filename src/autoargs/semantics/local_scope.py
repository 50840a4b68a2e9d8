"""Local scope tracking for receiver type inference."""

from __future__ import annotations

from dataclasses import dataclass

from autoargs.semantics.ast_utils import CSharpAstUtils
from autoargs.syntax.tree import SyntaxNode

# Members whose parameters and locals are visible to an expression inside them.
_FUNCTION_KINDS = (
    "method_declaration",
    "constructor_declaration",
    "destructor_declaration",
    "operator_declaration",
    "conversion_operator_declaration",
    "local_function_statement",
    "accessor_declaration",
    "lambda_expression",
    "anonymous_method_expression",
)

_MEMBER_KINDS = (
    "method_declaration",
    "constructor_declaration",
    "destructor_declaration",
    "operator_declaration",
    "conversion_operator_declaration",
    "property_declaration",
    "indexer_declaration",
    "global_statement",
)


@dataclass(frozen=True)
class LocalVariable:
    """A parameter or local declaration visible at some position."""

    name: str
    type_text: str | None
    initializer: SyntaxNode | None = None
    declared_at: int = 0

    @property
    def is_implicitly_typed(self) -> bool:
        return self.type_text in (None, "var")


class LocalScope:
    """Tracks parameters and local variables visible at one position.

    Later declarations shadow earlier ones; declarations that appear after
    the position of interest are ignored.
    """

    def __init__(self, position: int) -> None:
        """Initialize an empty scope for the given source position."""
        self.position = position
        self._variables: dict[str, LocalVariable] = {}

    def add(self, variable: LocalVariable) -> None:
        if variable.declared_at <= self.position:
            self._variables[variable.name] = variable

    def get(self, name: str) -> LocalVariable | None:
        return self._variables.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    @classmethod
    def build(cls, node: SyntaxNode) -> LocalScope:
        """Collect everything declared locally that ``node`` can see."""
        scope = cls(node.span.start)
        functions = [a for a in node.ancestors() if a.kind in _FUNCTION_KINDS]
        member = node.first_ancestor_or_self(*_MEMBER_KINDS)

        # outermost first so inner lambda parameters shadow outer names
        for function in reversed(functions):
            for variable in _parameters_of(function):
                scope.add(variable)
        if member is not None:
            for descendant in member.descendants():
                for variable in _declarations_in(descendant):
                    scope.add(variable)
        return scope


def _parameters_of(function: SyntaxNode) -> list[LocalVariable]:
    variables: list[LocalVariable] = []
    if function.kind == "lambda_expression":
        params = function.child_by_field_name("parameters")
        if params is not None and params.kind == "identifier":
            # x => ...
            return [LocalVariable(params.text, None, declared_at=params.span.start)]
    params_node = CSharpAstUtils.find_parameter_list(function)
    if params_node is None:
        return variables
    for syntax in CSharpAstUtils.iter_parameter_syntax(params_node):
        if syntax.name is None:
            continue
        type_node = syntax.type_node
        type_text = CSharpAstUtils.get_type_text(type_node) if type_node else None
        if type_text and syntax.is_params and not type_text.endswith("]"):
            type_text = f"{type_text}[]"
        variables.append(
            LocalVariable(syntax.name, type_text, declared_at=syntax.anchor.span.start)
        )
    return variables


def _declarations_in(node: SyntaxNode) -> list[LocalVariable]:
    if node.kind == "variable_declaration":
        if node.parent is not None and node.parent.kind in (
            "field_declaration",
            "event_field_declaration",
        ):
            return []
        type_node = node.child_by_field_name("type")
        type_text = CSharpAstUtils.get_type_text(type_node) if type_node else None
        variables = []
        for declarator in node.children:
            if declarator.kind != "variable_declarator":
                continue
            name = CSharpAstUtils.get_name(declarator)
            if name:
                variables.append(
                    LocalVariable(
                        name,
                        type_text,
                        initializer=_initializer_of(declarator),
                        declared_at=declarator.span.start,
                    )
                )
        return variables

    if node.kind == "foreach_statement":
        type_node = node.child_by_field_name("type")
        left = node.child_by_field_name("left")
        if type_node is not None and left is not None and left.kind == "identifier":
            return [
                LocalVariable(
                    left.text,
                    CSharpAstUtils.get_type_text(type_node),
                    declared_at=left.span.start,
                )
            ]
    return []


def _initializer_of(declarator: SyntaxNode) -> SyntaxNode | None:
    """Expression after ``=`` in a variable declarator, if any."""
    seen_equals = False
    for child in declarator.children:
        if child.kind == "equals_value_clause":
            named = child.named_children
            return named[-1] if named else None
        if seen_equals:
            return child
        if child.kind == "=":
            seen_equals = True
    return None
