"""Refactoring provider: placeholder arguments for mocked calls.

Given the selection in a document, the provider checks whether the cursor
is inside the empty argument list of a call on a substitute and, if so,
offers one action per overload of the called member.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from autoargs.core.config import AutoArgsConfig, get_config
from autoargs.refactoring.actions import CodeAction, CodeActionGroup, create_code_action
from autoargs.refactoring.applicability import (
    find_empty_argument_invocation,
    get_invocation_receiver,
    is_mock_receiver,
    references_mocking_library,
)
from autoargs.refactoring.candidates import resolve_candidates
from autoargs.syntax.tree import TextSpan
from autoargs.workspace.cancellation import CancellationToken
from autoargs.workspace.document import Document

logger = logging.getLogger(__name__)

Suggestion = CodeAction | CodeActionGroup


@dataclass
class RefactoringContext:
    """What the host hands the provider for one request."""

    document: Document
    span: TextSpan
    cancellation_token: CancellationToken = field(default_factory=CancellationToken)
    register_refactoring: Callable[[Suggestion], None] | None = None
    registered: list[Suggestion] = field(default_factory=list)

    def register(self, suggestion: Suggestion) -> None:
        self.registered.append(suggestion)
        if self.register_refactoring is not None:
            self.register_refactoring(suggestion)


class AutoArgsRefactoringProvider:
    """Offers ``Arg.Any<T>()`` placeholder arguments for empty calls on substitutes."""

    def __init__(self, config: AutoArgsConfig | None = None) -> None:
        self._config = config or get_config()

    async def compute_refactorings(self, context: RefactoringContext) -> None:
        """Register zero or one suggestion with ``context``.

        Raises:
            OperationCancelledError: If the request is cancelled; nothing is
                registered in that case.
        """
        suggestion = await self.compute_suggestion(
            context.document, context.span, context.cancellation_token
        )
        if suggestion is not None:
            context.register(suggestion)

    async def compute_suggestion(
        self,
        document: Document,
        span: TextSpan,
        cancellation_token: CancellationToken | None = None,
    ) -> Suggestion | None:
        """Compute the suggestion for ``span`` without registering it.

        Args:
            document: Document containing the selection.
            span: Selected text span (zero length for a caret).
            cancellation_token: Token checked before each expensive step.

        Returns:
            A single action, a group of per-overload actions, or None.
        """
        token = cancellation_token or CancellationToken.none()
        config = self._config

        root = await document.get_syntax_root(token)
        node = root.find_node(span)

        invocation = find_empty_argument_invocation(node)
        if invocation is None:
            return None
        receiver = get_invocation_receiver(invocation)
        if receiver is None:
            return None

        token.throw_if_cancellation_requested()
        semantic_model = await document.get_semantic_model(token)

        token.throw_if_cancellation_requested()
        if not is_mock_receiver(receiver, semantic_model):
            return None
        if not references_mocking_library(semantic_model, config):
            return None

        token.throw_if_cancellation_requested()
        candidates = resolve_candidates(invocation, semantic_model)
        if not candidates:
            return None

        has_overloads = len(candidates) > 1
        actions = [
            create_code_action(document, root, invocation, has_overloads, method, config)
            for method in candidates
        ]
        logger.debug(f"Offering {len(actions)} action(s) for {invocation.text!r}")
        if has_overloads:
            return CodeActionGroup(config.action_title, tuple(actions), is_inlinable=False)
        return actions[0]
