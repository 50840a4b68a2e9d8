"""Persistent C# syntax trees backed by tree-sitter parsing."""

from autoargs.syntax.parser import (
    CSharpParser,
    get_parser,
    parse_compilation_unit,
    parse_type_name,
)
from autoargs.syntax.tree import (
    ArgumentList,
    GreenElement,
    GreenNode,
    GreenToken,
    InvocationExpression,
    MemberAccessExpression,
    SyntaxNode,
    TextSpan,
    with_trailing_trivia,
    without_trivia,
)

__all__ = [
    "ArgumentList",
    "CSharpParser",
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "InvocationExpression",
    "MemberAccessExpression",
    "SyntaxNode",
    "TextSpan",
    "get_parser",
    "parse_compilation_unit",
    "parse_type_name",
    "with_trailing_trivia",
    "without_trivia",
]
