"""Checks deciding whether placeholder arguments are offered at all.

The checks are deliberately narrow: the cursor must sit in the empty
argument list of a member call on an interface-typed receiver, in a project
that references the mocking library. Anything else is silently rejected.
"""

from __future__ import annotations

import logging

from autoargs.core.config import AutoArgsConfig, get_config
from autoargs.core.models import TypeKind
from autoargs.semantics.model import SemanticModel
from autoargs.syntax.tree import (
    ArgumentList,
    InvocationExpression,
    MemberAccessExpression,
    SyntaxNode,
)

logger = logging.getLogger(__name__)


def find_empty_argument_invocation(node: SyntaxNode) -> InvocationExpression | None:
    """Return the invocation whose empty argument list contains ``node``.

    Ascends to the nearest argument list. The list must have no arguments and
    belong directly to an invocation.
    """
    argument_list = node.first_ancestor_or_self("argument_list")
    if not isinstance(argument_list, ArgumentList):
        logger.debug(f"No argument list around {node.kind}")
        return None
    if not argument_list.is_empty:
        logger.debug("Argument list is not empty")
        return None
    invocation = argument_list.parent
    if not isinstance(invocation, InvocationExpression):
        logger.debug("Argument list does not belong to an invocation")
        return None
    return invocation


def get_invocation_receiver(invocation: InvocationExpression) -> SyntaxNode | None:
    """Receiver of ``target.Member()``, or None when the callee is not a member access."""
    callee = invocation.expression
    if not isinstance(callee, MemberAccessExpression):
        logger.debug("Callee is not a member access")
        return None
    return callee.target


def is_mock_receiver(receiver: SyntaxNode, semantic_model: SemanticModel) -> bool:
    """Check that the receiver's static type is an interface."""
    type_info = semantic_model.type_of(receiver)
    if type_info is None or type_info.kind != TypeKind.INTERFACE:
        kind = type_info.kind.value if type_info else "unknown"
        logger.debug(f"Receiver {receiver.text!r} has type kind {kind}")
        return False
    return True


def references_mocking_library(
    semantic_model: SemanticModel, config: AutoArgsConfig | None = None
) -> bool:
    """Check the project's external dependencies for the mocking library."""
    config = config or get_config()
    found = any(
        config.mocking_library in name for name in semantic_model.external_dependency_names()
    )
    if not found:
        logger.debug(f"Project does not reference {config.mocking_library}")
    return found


def find_applicable_invocation(
    node: SyntaxNode,
    semantic_model: SemanticModel,
    config: AutoArgsConfig | None = None,
) -> InvocationExpression | None:
    """Run every check against the node at the selection.

    Returns:
        The invocation to rewrite, or None when nothing should be offered.
    """
    invocation = find_empty_argument_invocation(node)
    if invocation is None:
        return None
    receiver = get_invocation_receiver(invocation)
    if receiver is None:
        return None
    if not is_mock_receiver(receiver, semantic_model):
        return None
    if not references_mocking_library(semantic_model, config):
        return None
    return invocation
