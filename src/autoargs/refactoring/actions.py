"""Code actions that insert placeholder arguments.

Actions are cheap to create: the argument list is only built when the host
asks an action for its changed document.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from autoargs.core.config import AutoArgsConfig, get_config
from autoargs.core.models import MethodSymbol
from autoargs.refactoring.arguments import create_args_any
from autoargs.syntax.tree import InvocationExpression, SyntaxNode, with_trailing_trivia
from autoargs.workspace.cancellation import CancellationToken
from autoargs.workspace.document import Document

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


@dataclass(frozen=True)
class CodeAction:
    """A named, deferred document change."""

    title: str
    create_changed_document: Callable[[CancellationToken], Awaitable[Document]] = field(
        repr=False, compare=False
    )
    equivalence_key: str | None = None

    async def get_changed_document(
        self, cancellation_token: CancellationToken | None = None
    ) -> Document:
        """Run the action and return the rewritten document."""
        token = cancellation_token or CancellationToken.none()
        token.throw_if_cancellation_requested()
        return await self.create_changed_document(token)


@dataclass(frozen=True)
class CodeActionGroup:
    """Mutually exclusive actions shown as one entry."""

    title: str
    actions: tuple[CodeAction, ...]
    is_inlinable: bool = False


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to at most ``max_length`` characters, marking the cut with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS


def get_method_display(method: MethodSymbol, max_length: int = 50) -> str:
    """Short label for one overload.

    Starts at the last separator before the parameter list, so
    ``Shop.IOrders.Place(int, string)`` becomes ``.Place(int, string)``.
    """
    full_name = method.to_display_string()
    bracket = full_name.find("(")
    if bracket < 0:
        return truncate(full_name, max_length)
    dot = full_name.rfind(".", 0, bracket)
    if dot < 0:
        return truncate(full_name, max_length)
    return truncate(full_name[dot:], max_length)


def create_code_action(
    document: Document,
    root: SyntaxNode,
    invocation: InvocationExpression,
    has_overloads: bool,
    method: MethodSymbol,
    config: AutoArgsConfig | None = None,
) -> CodeAction:
    """Create the action that fills ``invocation`` with placeholders for ``method``.

    Args:
        document: Document the invocation belongs to.
        root: Syntax root of ``document``.
        invocation: The call with an empty argument list.
        has_overloads: Whether several candidates are offered together; selects
            a per-overload label instead of the fixed title.
        method: Overload whose parameter types drive the placeholders.
        config: Configuration; defaults to the global one.

    Returns:
        A CodeAction that rewrites the call when invoked.
    """
    config = config or get_config()
    parameter_types = tuple(method.parameter_types)
    title = (
        get_method_display(method, config.label_max_length)
        if has_overloads
        else config.action_title
    )

    async def create_changed_document(token: CancellationToken) -> Document:
        token.throw_if_cancellation_requested()
        argument_list = create_args_any(parameter_types, config)
        new_invocation = with_trailing_trivia(
            invocation.with_argument_list(argument_list), config.newline
        )
        new_root = root.replace_node(invocation, new_invocation)
        logger.debug(f"Rewrote {invocation.text!r} for {method.to_display_string()}")
        return document.with_syntax_root(new_root)

    return CodeAction(
        title=title,
        create_changed_document=create_changed_document,
        equivalence_key=method.to_display_string(),
    )
