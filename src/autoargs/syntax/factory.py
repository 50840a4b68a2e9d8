"""Builders for green nodes of generated C# code.

Generated nodes use the same kinds and field labels as parsed ones, so the
views in ``autoargs.syntax.tree`` work on both.
"""

from __future__ import annotations

from collections.abc import Sequence

from autoargs.syntax.tree import GreenElement, GreenNode, GreenToken


def punctuation(text: str, trailing_trivia: str = "") -> GreenToken:
    return GreenToken(text, text, trailing_trivia=trailing_trivia)


def identifier(name: str) -> GreenToken:
    return GreenToken("identifier", name, is_named=True)


def _separated(
    items: Sequence[GreenElement], separator: str, separator_trivia: str
) -> list[GreenElement]:
    result: list[GreenElement] = []
    for index, item in enumerate(items):
        if index:
            result.append(punctuation(separator, separator_trivia))
        result.append(item)
    return result


def type_argument_list(types: Sequence[GreenElement]) -> GreenNode:
    """``<T1, T2>``"""
    children = [punctuation("<"), *_separated(types, ",", " "), punctuation(">")]
    return GreenNode("type_argument_list", tuple(children))


def generic_name(name: str, types: Sequence[GreenElement]) -> GreenNode:
    """``Name<T1, ...>``"""
    return GreenNode("generic_name", (identifier(name), type_argument_list(types)))


def member_access_expression(expression: GreenElement, name: GreenElement) -> GreenNode:
    """``expression.name``"""
    return GreenNode(
        "member_access_expression",
        (expression, punctuation("."), name),
        ("expression", None, "name"),
    )


def argument(expression: GreenElement) -> GreenNode:
    return GreenNode("argument", (expression,))


def argument_list(arguments: Sequence[GreenElement] = ()) -> GreenNode:
    """``(a, b, c)``"""
    children = [punctuation("("), *_separated(arguments, ",", " "), punctuation(")")]
    return GreenNode("argument_list", tuple(children))


def invocation_expression(
    function: GreenElement, arguments: GreenNode | None = None
) -> GreenNode:
    """``function(arguments)``"""
    if arguments is None:
        arguments = argument_list()
    return GreenNode(
        "invocation_expression",
        (function, arguments),
        ("function", "arguments"),
    )
