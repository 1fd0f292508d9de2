"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class the session controller threads through
each stream. The token is the intent record; callbacks registered on it perform
the authoritative action (closing the transport).
"""

from __future__ import annotations

from contextlib import suppress
from typing import Callable, List

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token with cancel-time callbacks.

    All access happens on the event loop thread, so no locking is needed.
    Callbacks fire once, in registration order, on the first ``cancel``.
    """

    def __init__(self) -> None:
        self._state = State()
        self._callbacks: List[Callable[[], object]] = []

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    @property
    def released(self) -> bool:  # noqa: D401 - short form
        """Whether the token was released at stream teardown."""
        return self._state.released

    def add_callback(self, callback: Callable[[], object]) -> None:
        """Register ``callback`` to run on cancel (immediately if already cancelled)."""
        if self._state.cancelled:
            with suppress(Exception):
                callback()
            return
        if not self._state.released:
            self._callbacks.append(callback)

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation; idempotent."""
        if self._state.cancelled:
            return
        self._state.cancelled = True
        self._state.reason = reason
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            with suppress(Exception):
                callback()

    def release(self) -> None:
        """Drop registered callbacks; called once the stream has torn down."""
        self._state.released = True
        self._callbacks.clear()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "stream cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, released={self._state.released})"
        )


__all__ = ["CancellationToken"]
