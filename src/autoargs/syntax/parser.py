"""C# parser bridge using tree-sitter-c-sharp.

This module parses C# source with tree-sitter and converts the concrete
tree into the persistent green tree used by the rest of AutoArgs. Every byte
of the input ends up either in a token or in the trivia attached to one, so
``parse_compilation_unit(text).full_text == text`` holds for any input.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import lru_cache

import tree_sitter_c_sharp as tscsharp
from tree_sitter import Language, Node, Parser

from autoargs.syntax.tree import (
    GreenElement,
    GreenNode,
    GreenToken,
    SyntaxNode,
    without_trivia,
)

logger = logging.getLogger(__name__)

END_OF_FILE = "end_of_file"

_TYPE_HOST_TEMPLATE = "class __AutoArgsTypeHost {{ object __value = typeof({type_name}); }}"


def _children_with_fields(node: Node) -> Iterator[tuple[Node, str | None]]:
    """Yield each child of ``node`` together with its field label."""
    cursor = node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.node, cursor.field_name
        if not cursor.goto_next_sibling():
            break


def _iter_leaves(node: Node) -> Iterator[Node]:
    if node.child_count == 0:
        yield node
        return
    for child, _ in _children_with_fields(node):
        yield from _iter_leaves(child)


def _split_gap(gap: str) -> tuple[str, str]:
    """Split the text between two tokens into (trailing, leading) trivia.

    The trailing part runs up to and including the first line break.
    """
    newline = gap.find("\n")
    if newline < 0:
        return gap, ""
    return gap[:newline + 1], gap[newline + 1:]


class CSharpParser:
    """Parses C# source into persistent syntax trees."""

    def __init__(self) -> None:
        self._language = Language(tscsharp.language())
        self._parser = Parser(self._language)

    def parse_compilation_unit(self, text: str) -> SyntaxNode:
        """Parse a whole document and return the root view.

        The root always ends with a zero-width ``end_of_file`` token that
        carries whatever trivia follows the last real token.
        """
        content = text.encode("utf-8")
        tree = self._parser.parse(content)
        if tree.root_node.has_error:
            logger.debug("Document parsed with syntax errors")
        green = self._to_green(tree.root_node, content, 0, len(content), add_eof=True)
        return SyntaxNode.create(green)

    def parse_type_name(self, type_name: str) -> GreenElement | None:
        """Parse ``type_name`` as the operand of ``typeof`` and return the type subtree.

        Returns None when the text does not parse cleanly as a single type.
        """
        stripped = type_name.strip()
        if not stripped:
            return None
        content = _TYPE_HOST_TEMPLATE.format(type_name=stripped).encode("utf-8")
        tree = self._parser.parse(content)
        if tree.root_node.has_error:
            return None

        typeof_node = _find_first(tree.root_node, "typeof_expression")
        if typeof_node is None:
            return None
        type_node = typeof_node.child_by_field_name("type")
        if type_node is None:
            named = [c for c in typeof_node.children if c.is_named]
            if not named:
                return None
            type_node = named[0]

        parsed_text = content[type_node.start_byte:type_node.end_byte].decode("utf-8")
        if "".join(parsed_text.split()) != "".join(stripped.split()):
            return None

        green = self._to_green(
            type_node, content, type_node.start_byte, type_node.end_byte, add_eof=False
        )
        return without_trivia(green)

    def _to_green(
        self, root: Node, content: bytes, start: int, end: int, add_eof: bool
    ) -> GreenElement:
        if add_eof and root.child_count == 0:
            eof = GreenToken(END_OF_FILE, "", leading_trivia=content[start:end].decode("utf-8"))
            return GreenNode(root.type, (eof,))

        leaves = list(_iter_leaves(root))
        leading: list[str] = []
        trailing: list[str] = []

        previous_end = start
        for leaf in leaves:
            gap = content[previous_end:leaf.start_byte].decode("utf-8")
            if trailing:
                trailing[-1], rest = _split_gap(gap)
            else:
                rest = gap
            leading.append(rest)
            trailing.append("")
            previous_end = max(previous_end, leaf.end_byte)

        tail = content[previous_end:end].decode("utf-8")
        if trailing:
            trailing[-1], eof_leading = _split_gap(tail)
        else:
            eof_leading = tail

        position = iter(range(len(leaves)))

        def build(node: Node) -> GreenElement:
            if node.child_count == 0:
                i = next(position)
                return GreenToken(
                    kind=node.type,
                    text=content[node.start_byte:node.end_byte].decode("utf-8"),
                    leading_trivia=leading[i],
                    trailing_trivia=trailing[i],
                    is_named=node.is_named,
                )
            children: list[GreenElement] = []
            labels: list[str | None] = []
            for child, label in _children_with_fields(node):
                children.append(build(child))
                labels.append(label)
            return GreenNode(node.type, tuple(children), tuple(labels))

        green = build(root)
        if add_eof:
            assert isinstance(green, GreenNode)
            eof = GreenToken(END_OF_FILE, "", leading_trivia=eof_leading)
            green = GreenNode(
                green.kind, green.children + (eof,), green.field_names + (None,)
            )
        return green


def _find_first(node: Node, kind: str) -> Node | None:
    if node.type == kind:
        return node
    for child in node.children:
        found = _find_first(child, kind)
        if found is not None:
            return found
    return None


@lru_cache
def get_parser() -> CSharpParser:
    """Get the shared parser instance."""
    return CSharpParser()


def parse_compilation_unit(text: str) -> SyntaxNode:
    """Parse a C# document with the shared parser."""
    return get_parser().parse_compilation_unit(text)


def parse_type_name(type_name: str) -> GreenElement | None:
    """Parse a type display string with the shared parser."""
    return get_parser().parse_type_name(type_name)
