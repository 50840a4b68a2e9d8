"""Unit tests for the persistent syntax tree."""

import pytest

from autoargs.syntax import factory
from autoargs.syntax.tree import (
    ArgumentList,
    GreenNode,
    GreenToken,
    InvocationExpression,
    MemberAccessExpression,
    SyntaxNode,
    TextSpan,
    with_trailing_trivia,
    without_trivia,
)


def _call_statement() -> GreenNode:
    """``  sub.Place();\\n`` built by hand."""
    receiver = GreenToken("identifier", "sub", leading_trivia="  ", is_named=True)
    callee = factory.member_access_expression(receiver, factory.identifier("Place"))
    invocation = factory.invocation_expression(callee)
    semicolon = GreenToken(";", ";", trailing_trivia="\n")
    return GreenNode("expression_statement", (invocation, semicolon))


class TestTextSpan:
    """Tests for TextSpan."""

    def test_end(self) -> None:
        assert TextSpan(3, 4).end == 7

    def test_contains(self) -> None:
        outer = TextSpan(0, 10)
        assert outer.contains(TextSpan(2, 3))
        assert outer.contains(TextSpan(10, 0))
        assert not outer.contains(TextSpan(8, 5))

    def test_from_bounds(self) -> None:
        assert TextSpan.from_bounds(4, 9) == TextSpan(4, 5)


class TestGreenElements:
    """Tests for green nodes and tokens."""

    def test_full_width_includes_trivia(self) -> None:
        green = _call_statement()
        assert green.full_width == len("  sub.Place();\n")
        assert green.to_full_string() == "  sub.Place();\n"
        assert green.to_string() == "sub.Place();"

    def test_structural_equality(self) -> None:
        assert _call_statement() == _call_statement()
        assert hash(factory.identifier("x")) == hash(factory.identifier("x"))

    def test_field_names_default_to_none(self) -> None:
        node = GreenNode("argument", (factory.identifier("x"),))
        assert node.field_names == (None,)

    def test_field_names_length_must_match(self) -> None:
        with pytest.raises(ValueError):
            GreenNode("argument", (factory.identifier("x"),), ("a", "b"))

    def test_with_child_shares_siblings(self) -> None:
        green = _call_statement()
        replaced = green.with_child(1, GreenToken(";", ";"))
        assert replaced.children[0] is green.children[0]
        assert replaced.to_full_string() == "  sub.Place();"

    def test_with_trailing_trivia(self) -> None:
        green = with_trailing_trivia(_call_statement(), "\r\n")
        assert green.to_full_string() == "  sub.Place();\r\n"

    def test_without_trivia(self) -> None:
        assert without_trivia(_call_statement()).to_full_string() == "sub.Place();"


class TestSyntaxNode:
    """Tests for the positioned view."""

    def test_views_by_kind(self) -> None:
        root = SyntaxNode.create(_call_statement())
        invocation = root.children[0]
        assert isinstance(invocation, InvocationExpression)
        assert isinstance(invocation.expression, MemberAccessExpression)
        assert isinstance(invocation.argument_list, ArgumentList)
        assert invocation.argument_list.is_empty

    def test_positions_and_spans(self) -> None:
        root = SyntaxNode.create(_call_statement())
        invocation = root.children[0]
        assert invocation.full_span == TextSpan(0, len("  sub.Place()"))
        assert invocation.span == TextSpan(2, len("sub.Place()"))
        assert invocation.text == "sub.Place()"

    def test_member_access_parts(self) -> None:
        root = SyntaxNode.create(_call_statement())
        member = root.children[0].expression
        assert member.target.text == "sub"
        assert member.member_name == "Place"

    def test_parent_and_field_name(self) -> None:
        root = SyntaxNode.create(_call_statement())
        argument_list = root.children[0].argument_list
        assert argument_list.parent is root.children[0]
        assert argument_list.field_name == "arguments"
        assert argument_list.root is root

    def test_children_are_cached(self) -> None:
        root = SyntaxNode.create(_call_statement())
        assert root.children[0] is root.children[0]

    def test_find_token(self) -> None:
        root = SyntaxNode.create(_call_statement())
        token = root.find_token(root.full_text.index("Place"))
        assert token.kind == "identifier"
        assert token.text == "Place"

    def test_find_token_outside_raises(self) -> None:
        root = SyntaxNode.create(_call_statement())
        with pytest.raises(ValueError):
            root.find_token(100)

    def test_find_node_between_parentheses(self) -> None:
        root = SyntaxNode.create(_call_statement())
        caret = root.full_text.index(")")
        node = root.find_node(TextSpan(caret, 0))
        assert node.kind == "argument_list"

    def test_find_node_never_returns_token(self) -> None:
        root = SyntaxNode.create(_call_statement())
        node = root.find_node(TextSpan(root.full_text.index("sub"), 3))
        assert not node.is_token

    def test_descendants_preorder(self) -> None:
        root = SyntaxNode.create(_call_statement())
        kinds = [node.kind for node in root.descendants() if node.is_named]
        assert kinds[:3] == ["invocation_expression", "member_access_expression", "identifier"]


class TestReplaceNode:
    """Tests for structural replacement."""

    def test_replace_argument_list(self) -> None:
        root = SyntaxNode.create(_call_statement())
        invocation = root.children[0]
        arguments = factory.argument_list([factory.argument(factory.identifier("x"))])
        new_root = root.replace_node(invocation, invocation.with_argument_list(arguments))
        assert new_root.full_text == "  sub.Place(x);\n"
        # the old tree is untouched
        assert root.full_text == "  sub.Place();\n"

    def test_untouched_subtrees_are_shared(self) -> None:
        root = SyntaxNode.create(_call_statement())
        invocation = root.children[0]
        new_root = root.replace_node(
            invocation, invocation.with_argument_list(factory.argument_list())
        )
        assert new_root.green.children[1] is root.green.children[1]
        assert new_root.green.children[0].children[0] is root.green.children[0].children[0]

    def test_replace_foreign_node_raises(self) -> None:
        root = SyntaxNode.create(_call_statement())
        other = SyntaxNode.create(_call_statement())
        with pytest.raises(ValueError):
            root.replace_node(other.children[0], factory.identifier("x"))
