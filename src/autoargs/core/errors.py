"""Exception types raised by AutoArgs."""

from __future__ import annotations


class AutoArgsError(Exception):
    """Base class for AutoArgs errors."""


class OperationCancelledError(AutoArgsError):
    """Raised when the host abandons an in-flight request."""

    def __init__(self, message: str = "Operation was cancelled") -> None:
        super().__init__(message)


class DocumentNotFoundError(AutoArgsError):
    """Raised when a project has no document at the requested path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Document not found: {path}")
