"""Placeholder-argument refactoring for NSubstitute calls."""

from autoargs.refactoring.actions import (
    CodeAction,
    CodeActionGroup,
    create_code_action,
    get_method_display,
)
from autoargs.refactoring.applicability import (
    find_applicable_invocation,
    find_empty_argument_invocation,
    get_invocation_receiver,
    is_mock_receiver,
    references_mocking_library,
)
from autoargs.refactoring.arguments import create_arg_any, create_args_any
from autoargs.refactoring.candidates import resolve_candidates
from autoargs.refactoring.provider import (
    AutoArgsRefactoringProvider,
    RefactoringContext,
    Suggestion,
)
from autoargs.refactoring.type_synthesizer import create_type_syntax

__all__ = [
    "AutoArgsRefactoringProvider",
    "CodeAction",
    "CodeActionGroup",
    "RefactoringContext",
    "Suggestion",
    "create_arg_any",
    "create_args_any",
    "create_code_action",
    "create_type_syntax",
    "find_applicable_invocation",
    "find_empty_argument_invocation",
    "get_invocation_receiver",
    "get_method_display",
    "is_mock_receiver",
    "references_mocking_library",
    "resolve_candidates",
]
