"""Overload candidates for an argument-less call."""

from __future__ import annotations

import logging

from autoargs.core.models import Ambiguous, CandidateReason, MethodSymbol
from autoargs.semantics.model import SemanticModel
from autoargs.syntax.tree import InvocationExpression

logger = logging.getLogger(__name__)


def resolve_candidates(
    invocation: InvocationExpression, semantic_model: SemanticModel
) -> list[MethodSymbol]:
    """Methods the user may be about to call.

    With no arguments written yet, a call to a member that needs arguments
    fails overload resolution; the failure's candidates are exactly the
    overloads to offer. Every other outcome yields no candidates.
    """
    result = semantic_model.resolve_call_symbol(invocation)
    if isinstance(result, Ambiguous) and result.reason == CandidateReason.OVERLOAD_RESOLUTION_FAILURE:
        return list(result.candidates)
    logger.debug(f"Call {invocation.text!r} resolved as {type(result).__name__}; nothing to offer")
    return []
