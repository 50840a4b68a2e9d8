"""Persistent syntax tree.

The tree is split in two layers:

- Green elements (``GreenNode``, ``GreenToken``) are frozen values with
  structural equality. They know their kind, children and width but nothing
  about where they sit, so one green subtree can be shared by many trees.
- Red wrappers (``SyntaxNode``) are created lazily on top of a green root and
  add the parent back-reference, child index and absolute position.

Rewrites never mutate anything: ``SyntaxNode.replace_node`` rebuilds only the
green path from the replaced node up to the root and reuses every other green
subtree by reference.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True)
class TextSpan:
    """A half-open character range ``[start, start + length)``."""

    start: int
    length: int = 0

    @property
    def end(self) -> int:
        return self.start + self.length

    @classmethod
    def from_bounds(cls, start: int, end: int) -> TextSpan:
        return cls(start, end - start)

    def contains(self, other: TextSpan) -> bool:
        """Check whether ``other`` lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def contains_position(self, position: int) -> bool:
        return self.start <= position < self.end


@dataclass(frozen=True)
class GreenToken:
    """A leaf: token text plus the trivia attached on either side."""

    kind: str
    text: str
    leading_trivia: str = ""
    trailing_trivia: str = ""
    is_named: bool = False

    is_token: ClassVar[bool] = True

    @property
    def full_width(self) -> int:
        return len(self.leading_trivia) + len(self.text) + len(self.trailing_trivia)

    @property
    def leading_width(self) -> int:
        return len(self.leading_trivia)

    @property
    def trailing_width(self) -> int:
        return len(self.trailing_trivia)

    def first_token(self) -> GreenToken:
        return self

    def last_token(self) -> GreenToken:
        return self

    def to_full_string(self) -> str:
        return self.leading_trivia + self.text + self.trailing_trivia

    def to_string(self) -> str:
        return self.text

    def with_leading_trivia(self, trivia: str) -> GreenToken:
        return dataclasses.replace(self, leading_trivia=trivia)

    def with_trailing_trivia(self, trivia: str) -> GreenToken:
        return dataclasses.replace(self, trailing_trivia=trivia)


@dataclass(frozen=True)
class GreenNode:
    """An interior node: a kind and an ordered tuple of labelled children."""

    kind: str
    children: tuple[GreenElement, ...] = ()
    field_names: tuple[str | None, ...] = ()
    full_width: int = field(init=False, compare=False, repr=False)

    is_token: ClassVar[bool] = False
    is_named: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if not self.field_names:
            object.__setattr__(self, "field_names", (None,) * len(self.children))
        elif len(self.field_names) != len(self.children):
            raise ValueError(
                f"{self.kind}: {len(self.field_names)} field names for "
                f"{len(self.children)} children"
            )
        object.__setattr__(
            self, "full_width", sum(child.full_width for child in self.children)
        )

    def first_token(self) -> GreenToken | None:
        for child in self.children:
            token = child.first_token()
            if token is not None:
                return token
        return None

    def last_token(self) -> GreenToken | None:
        for child in reversed(self.children):
            token = child.last_token()
            if token is not None:
                return token
        return None

    @property
    def leading_width(self) -> int:
        token = self.first_token()
        return token.leading_width if token else 0

    @property
    def trailing_width(self) -> int:
        token = self.last_token()
        return token.trailing_width if token else 0

    def to_full_string(self) -> str:
        return "".join(child.to_full_string() for child in self.children)

    def to_string(self) -> str:
        full = self.to_full_string()
        return full[self.leading_width:len(full) - self.trailing_width]

    def field_index(self, name: str) -> int | None:
        """Index of the first child labelled ``name``."""
        for index, label in enumerate(self.field_names):
            if label == name:
                return index
        return None

    def with_child(self, index: int, child: GreenElement) -> GreenNode:
        """Return a copy with one child replaced; siblings are shared."""
        children = self.children[:index] + (child,) + self.children[index + 1:]
        return GreenNode(self.kind, children, self.field_names)


GreenElement = Union[GreenNode, GreenToken]


def with_trailing_trivia(element: GreenElement, trivia: str) -> GreenElement:
    """Replace the trailing trivia of the last token under ``element``."""
    if isinstance(element, GreenToken):
        return element.with_trailing_trivia(trivia)
    for index in range(len(element.children) - 1, -1, -1):
        child = element.children[index]
        if child.last_token() is not None:
            return element.with_child(index, with_trailing_trivia(child, trivia))
    return element


def without_trivia(element: GreenElement) -> GreenElement:
    """Strip the outer leading and trailing trivia of ``element``."""
    element = with_trailing_trivia(element, "")
    if isinstance(element, GreenToken):
        return element.with_leading_trivia("")
    for index, child in enumerate(element.children):
        if child.first_token() is not None:
            return element.with_child(index, _with_leading_trivia(child, ""))
    return element


def _with_leading_trivia(element: GreenElement, trivia: str) -> GreenElement:
    if isinstance(element, GreenToken):
        return element.with_leading_trivia(trivia)
    for index, child in enumerate(element.children):
        if child.first_token() is not None:
            return element.with_child(index, _with_leading_trivia(child, trivia))
    return element


class SyntaxNode:
    """Positioned view over a green element.

    Views are created on demand and cached per parent, so walking the same
    tree twice yields the same objects.
    """

    __slots__ = ("green", "parent", "position", "index", "_children")

    def __init__(
        self,
        green: GreenElement,
        parent: SyntaxNode | None = None,
        position: int = 0,
        index: int = 0,
    ) -> None:
        self.green = green
        self.parent = parent
        self.position = position
        self.index = index
        self._children: list[SyntaxNode] | None = None

    @staticmethod
    def create(
        green: GreenElement,
        parent: SyntaxNode | None = None,
        position: int = 0,
        index: int = 0,
    ) -> SyntaxNode:
        """Wrap ``green`` in the view class registered for its kind."""
        view = _VIEW_CLASSES.get(green.kind, SyntaxNode)
        return view(green, parent, position, index)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.kind} {self.span.start}..{self.span.end}>"

    @property
    def kind(self) -> str:
        return self.green.kind

    @property
    def is_token(self) -> bool:
        return self.green.is_token

    @property
    def is_named(self) -> bool:
        return self.green.is_named

    @property
    def full_span(self) -> TextSpan:
        return TextSpan(self.position, self.green.full_width)

    @property
    def span(self) -> TextSpan:
        start = self.position + self.green.leading_width
        end = self.position + self.green.full_width - self.green.trailing_width
        return TextSpan.from_bounds(start, max(start, end))

    @property
    def text(self) -> str:
        return self.green.to_string()

    @property
    def full_text(self) -> str:
        return self.green.to_full_string()

    @property
    def children(self) -> list[SyntaxNode]:
        if self._children is None:
            built: list[SyntaxNode] = []
            if isinstance(self.green, GreenNode):
                offset = self.position
                for index, child in enumerate(self.green.children):
                    built.append(SyntaxNode.create(child, self, offset, index))
                    offset += child.full_width
            self._children = built
        return self._children

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [child for child in self.children if child.is_named]

    @property
    def field_name(self) -> str | None:
        """Label of this node within its parent, if any."""
        if self.parent is None:
            return None
        return self.parent.green.field_names[self.index]

    def child_by_field_name(self, name: str) -> SyntaxNode | None:
        if not isinstance(self.green, GreenNode):
            return None
        index = self.green.field_index(name)
        return None if index is None else self.children[index]

    def children_by_field_name(self, name: str) -> list[SyntaxNode]:
        if not isinstance(self.green, GreenNode):
            return []
        return [
            self.children[index]
            for index, label in enumerate(self.green.field_names)
            if label == name
        ]

    @property
    def root(self) -> SyntaxNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def ancestors(self, include_self: bool = False) -> Iterator[SyntaxNode]:
        node = self if include_self else self.parent
        while node is not None:
            yield node
            node = node.parent

    def first_ancestor_or_self(self, *kinds: str) -> SyntaxNode | None:
        for node in self.ancestors(include_self=True):
            if node.kind in kinds:
                return node
        return None

    def descendants(self, include_self: bool = False) -> Iterator[SyntaxNode]:
        """Pre-order walk over the subtree."""
        if include_self:
            yield self
        for child in self.children:
            yield from child.descendants(include_self=True)

    def find_token(self, position: int) -> SyntaxNode:
        """Return the token whose full span contains ``position``.

        ``position`` equal to the end of this node maps to its last token.
        """
        full = self.full_span
        if not (full.contains_position(position) or position == full.end):
            raise ValueError(f"Position {position} is outside {full}")
        node: SyntaxNode = self
        while not node.is_token:
            children = node.children
            if not children:
                return node
            for child in children:
                if child.full_span.contains_position(position):
                    node = child
                    break
            else:
                node = children[-1]
        return node

    def find_node(self, span: TextSpan) -> SyntaxNode:
        """Return the innermost node (never a token) whose full span contains ``span``.

        When several nested nodes cover exactly the same span, the outermost
        one is returned.
        """
        found = self.find_token(span.start)
        node: SyntaxNode | None = found.parent if found.is_token else found
        while node is not None and not node.full_span.contains(span):
            node = node.parent
        if node is None:
            raise ValueError(f"No node contains {span}")
        while node.parent is not None and node.parent.span == node.span:
            node = node.parent
        return node

    def replace_node(self, old: SyntaxNode, new: GreenElement) -> SyntaxNode:
        """Return a new tree with ``old`` replaced by ``new``.

        Only the green nodes on the path from ``old`` to this root are
        rebuilt; every other subtree is shared with the current tree.
        """
        if old.root is not self:
            raise ValueError("Node does not belong to this tree")
        green: GreenElement = new
        current = old
        while current.parent is not None:
            parent_green = current.parent.green
            assert isinstance(parent_green, GreenNode)
            green = parent_green.with_child(current.index, green)
            current = current.parent
        return SyntaxNode.create(green)


class ArgumentList(SyntaxNode):
    """``( argument, ... )``"""

    __slots__ = ()

    @property
    def arguments(self) -> list[SyntaxNode]:
        return [child for child in self.children if child.kind == "argument"]

    @property
    def is_empty(self) -> bool:
        return not self.arguments


class InvocationExpression(SyntaxNode):
    """``expression argument_list``"""

    __slots__ = ()

    @property
    def expression(self) -> SyntaxNode | None:
        return self.child_by_field_name("function")

    @property
    def argument_list(self) -> ArgumentList | None:
        node = self.child_by_field_name("arguments")
        return node if isinstance(node, ArgumentList) else None

    def with_argument_list(self, argument_list: GreenNode) -> GreenNode:
        """Green copy of this invocation with a different argument list."""
        assert isinstance(self.green, GreenNode)
        index = self.green.field_index("arguments")
        if index is None:
            raise ValueError("Invocation has no argument list")
        return self.green.with_child(index, argument_list)


class MemberAccessExpression(SyntaxNode):
    """``target . name``"""

    __slots__ = ()

    @property
    def target(self) -> SyntaxNode | None:
        return self.child_by_field_name("expression")

    @property
    def name(self) -> SyntaxNode | None:
        return self.child_by_field_name("name")

    @property
    def member_name(self) -> str | None:
        name = self.name
        if name is None:
            return None
        if name.kind == "generic_name":
            for child in name.children:
                if child.kind == "identifier":
                    return child.text
        return name.text


_VIEW_CLASSES: dict[str, type[SyntaxNode]] = {
    "argument_list": ArgumentList,
    "invocation_expression": InvocationExpression,
    "member_access_expression": MemberAccessExpression,
}
