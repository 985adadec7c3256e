"""Cooperative cancellation for blocking store calls.

A token is shared between a caller and every listing or fetch it
starts; setting it makes the next checkpoint raise.
"""

from __future__ import annotations

import threading

from core.errors import StrataCancelledError


class CancelToken:
    """Thread-safe cancellation flag."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Signal cancellation to every holder of this token."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return whether cancellation was requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str) -> None:
        """Raise when cancellation was requested.

        Args:
            operation: Description of the interrupted operation.

        Raises:
            StrataCancelledError: If the token is cancelled.
        """
        if self._event.is_set():
            raise StrataCancelledError(f"{operation} cancelled by caller")


def check_cancelled(cancel: CancelToken | None, operation: str) -> None:
    """Raise ``StrataCancelledError`` if an optional token is cancelled."""
    if cancel is not None:
        cancel.raise_if_cancelled(operation)
