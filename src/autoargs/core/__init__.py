"""Core module containing configuration, symbol models and errors."""

from autoargs.core.config import AutoArgsConfig, get_config, reload_config
from autoargs.core.errors import (
    AutoArgsError,
    DocumentNotFoundError,
    OperationCancelledError,
)
from autoargs.core.models import (
    Ambiguous,
    CandidateReason,
    MethodSymbol,
    ParameterSymbol,
    Resolved,
    ResolutionResult,
    TypeInfo,
    TypeKind,
    Unresolved,
)

__all__ = [
    "Ambiguous",
    "AutoArgsConfig",
    "AutoArgsError",
    "CandidateReason",
    "DocumentNotFoundError",
    "MethodSymbol",
    "OperationCancelledError",
    "ParameterSymbol",
    "Resolved",
    "ResolutionResult",
    "TypeInfo",
    "TypeKind",
    "Unresolved",
    "get_config",
    "reload_config",
]
