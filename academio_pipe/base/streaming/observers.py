"""Ready-made ``StreamObserver`` implementations.

``BaseStreamObserver`` gives no-op defaults so a call site overrides only what
it needs; ``CallbackObserver`` adapts plain callables (the façade's options);
``FanOutObserver`` forwards to several observers in order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from ..models import AssembledMessage
from .wire_event import WireEvent

if TYPE_CHECKING:
    from ..interfaces import StreamObserver


class BaseStreamObserver:
    """No-op observer."""

    def on_start(self, event: WireEvent) -> None:
        return None

    def on_delta(self, text: str, delta: str) -> None:
        return None

    def on_done(self, event: WireEvent, text: str) -> None:
        return None

    def on_message(self, message: AssembledMessage) -> None:
        return None

    def on_error(self, message: str) -> None:
        return None


class CallbackObserver(BaseStreamObserver):
    """Observer delegating to optional callables."""

    def __init__(
        self,
        *,
        on_start: Optional[Callable[[WireEvent], None]] = None,
        on_delta: Optional[Callable[[str, str], None]] = None,
        on_done: Optional[Callable[[WireEvent, str], None]] = None,
        on_message: Optional[Callable[[AssembledMessage], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._on_start = on_start
        self._on_delta = on_delta
        self._on_done = on_done
        self._on_message = on_message
        self._on_error = on_error

    def on_start(self, event: WireEvent) -> None:
        if self._on_start is not None:
            self._on_start(event)

    def on_delta(self, text: str, delta: str) -> None:
        if self._on_delta is not None:
            self._on_delta(text, delta)

    def on_done(self, event: WireEvent, text: str) -> None:
        if self._on_done is not None:
            self._on_done(event, text)

    def on_message(self, message: AssembledMessage) -> None:
        if self._on_message is not None:
            self._on_message(message)

    def on_error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)


class FanOutObserver(BaseStreamObserver):
    """Forward every callback to ``observers`` in sequence order.

    A raising observer does not starve the ones after it: every observer is
    called, then the first exception is re-raised.
    """

    def __init__(self, observers: Sequence[StreamObserver]) -> None:
        self._observers = tuple(observers)

    def _dispatch(self, name: str, *args: Any) -> None:
        first: Optional[Exception] = None
        for obs in self._observers:
            try:
                getattr(obs, name)(*args)
            except Exception as exc:  # noqa: BLE001 - re-raised after the loop
                if first is None:
                    first = exc
        if first is not None:
            raise first

    def on_start(self, event: WireEvent) -> None:
        self._dispatch("on_start", event)

    def on_delta(self, text: str, delta: str) -> None:
        self._dispatch("on_delta", text, delta)

    def on_done(self, event: WireEvent, text: str) -> None:
        self._dispatch("on_done", event, text)

    def on_message(self, message: AssembledMessage) -> None:
        self._dispatch("on_message", message)

    def on_error(self, message: str) -> None:
        self._dispatch("on_error", message)


__all__ = ["BaseStreamObserver", "CallbackObserver", "FanOutObserver"]
