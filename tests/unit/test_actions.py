"""Unit tests for code actions and their labels."""

from __future__ import annotations

import asyncio

import pytest

from autoargs.core.config import AutoArgsConfig
from autoargs.core.errors import OperationCancelledError
from autoargs.core.models import MethodSymbol, ParameterSymbol
from autoargs.refactoring.actions import (
    CodeAction,
    CodeActionGroup,
    create_code_action,
    get_method_display,
    truncate,
)
from autoargs.refactoring.applicability import find_empty_argument_invocation
from autoargs.syntax import factory
from autoargs.workspace.cancellation import CancellationToken


def _method(containing_type: str, name: str, *types: str) -> MethodSymbol:
    return MethodSymbol(
        name=name,
        containing_type=containing_type,
        parameters=[ParameterSymbol(name=f"p{i}", type_name=t) for i, t in enumerate(types)],
    )


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self) -> None:
        assert truncate("abc", 50) == "abc"

    def test_exact_length_unchanged(self) -> None:
        assert truncate("x" * 50, 50) == "x" * 50

    def test_long_text_cut_with_ellipsis(self) -> None:
        result = truncate("x" * 60, 50)
        assert len(result) == 50
        assert result.endswith("...")


class TestGetMethodDisplay:
    """Tests for get_method_display."""

    def test_starts_at_last_separator(self) -> None:
        method = _method("Shop.Services.IOrderService", "Cancel", "int", "bool")
        assert get_method_display(method) == ".Cancel(int, bool)"

    def test_generic_containing_type(self) -> None:
        method = _method("Shop.Data.IRepository<Shop.Models.Order>", "Save", "Shop.Models.Order")
        assert get_method_display(method) == ".Save(Shop.Models.Order)"

    def test_long_signature_is_bounded(self) -> None:
        method = _method(
            "Shop.IOrderService",
            "Place",
            "Dictionary<string, List<int>>",
            "IEnumerable<KeyValuePair<string, int>>",
        )
        label = get_method_display(method)
        assert len(label) == 50
        assert label.startswith(".Place(Dictionary<string, List<int>>")
        assert label.endswith("...")

    def test_configured_bound(self) -> None:
        method = _method("Shop.IOrderService", "Place", "int", "string")
        assert get_method_display(method, 12) == ".Place(in..."

    def test_distinct_overloads_get_distinct_labels(self) -> None:
        first = _method("Shop.IOrderService", "Cancel", "int")
        second = _method("Shop.IOrderService", "Cancel", "int", "bool")
        assert get_method_display(first) != get_method_display(second)


SOURCE = """\
using NSubstitute;
using Shop.Services;

public class OrderTests
{
    public void Run()
    {
        var orders = Substitute.For<IOrderService>();
        orders.Place($$);
    }
}
"""


@pytest.fixture
def call_site(make_document):
    document, span = make_document(SOURCE)
    root = asyncio.run(document.get_syntax_root())
    invocation = find_empty_argument_invocation(root.find_node(span))
    assert invocation is not None
    return document, root, invocation


class TestCreateCodeAction:
    """Tests for create_code_action."""

    def test_single_candidate_uses_fixed_title(self, call_site, config: AutoArgsConfig) -> None:
        document, root, invocation = call_site
        method = _method("Shop.Services.IOrderService", "Place", "int", "string")
        action = create_code_action(document, root, invocation, False, method, config)
        assert action.title == "Add wildcard-match arguments"

    def test_overload_uses_signature_label(self, call_site, config: AutoArgsConfig) -> None:
        document, root, invocation = call_site
        method = _method("Shop.Services.IOrderService", "Place", "int", "string")
        action = create_code_action(document, root, invocation, True, method, config)
        assert action.title == ".Place(int, string)"
        assert action.equivalence_key == "Shop.Services.IOrderService.Place(int, string)"

    def test_rewrites_call_and_appends_line_break(
        self, call_site, config: AutoArgsConfig
    ) -> None:
        document, root, invocation = call_site
        method = _method("Shop.Services.IOrderService", "Place", "int", "string")
        action = create_code_action(document, root, invocation, False, method, config)

        changed = asyncio.run(action.get_changed_document())

        expected = document.text.replace(
            "orders.Place();",
            "orders.Place(Arg.Any<int>(), Arg.Any<string>())\n;",
        )
        assert changed.text == expected
        assert changed.path == document.path
        # the original snapshot is unchanged
        assert document.text.count("orders.Place();") == 1

    def test_crlf_line_ending(self, call_site) -> None:
        document, root, invocation = call_site
        config = AutoArgsConfig(_env_file=None, line_ending="crlf")
        method = _method("Shop.Services.IOrderService", "Place", "int")
        action = create_code_action(document, root, invocation, False, method, config)
        changed = asyncio.run(action.get_changed_document())
        assert "orders.Place(Arg.Any<int>())\r\n;" in changed.text

    def test_action_is_deferred(self, call_site, config: AutoArgsConfig, monkeypatch) -> None:
        calls = []

        def fake_create_args_any(types, cfg):
            calls.append(types)
            return factory.argument_list()

        monkeypatch.setattr("autoargs.refactoring.actions.create_args_any", fake_create_args_any)
        document, root, invocation = call_site
        method = _method("Shop.Services.IOrderService", "Place", "int")
        action = create_code_action(document, root, invocation, False, method, config)
        assert calls == []
        asyncio.run(action.get_changed_document())
        assert calls == [("int",)]

    def test_cancelled_action(self, call_site, config: AutoArgsConfig) -> None:
        document, root, invocation = call_site
        method = _method("Shop.Services.IOrderService", "Place", "int")
        action = create_code_action(document, root, invocation, False, method, config)
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            asyncio.run(action.get_changed_document(token))


def test_group_is_not_inlinable() -> None:
    async def _unused(token):
        raise AssertionError

    action = CodeAction("a", _unused)
    group = CodeActionGroup("Add wildcard-match arguments", (action,))
    assert group.is_inlinable is False
    assert group.actions == (action,)
