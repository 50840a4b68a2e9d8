"""Cooperative cancellation."""

from __future__ import annotations

from autoargs.core.errors import OperationCancelledError


class CancellationToken:
    """Signal the host sets to abandon an in-flight request.

    Work checks the token at its own checkpoints; nothing is interrupted
    from the outside.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @classmethod
    def none(cls) -> CancellationToken:
        """A fresh token that nobody will cancel."""
        return cls()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def throw_if_cancellation_requested(self) -> None:
        """Raise OperationCancelledError if cancel() has been called."""
        if self._cancelled:
            raise OperationCancelledError()
