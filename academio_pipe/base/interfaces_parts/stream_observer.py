"""StreamObserver Protocol (single-class module).

The accumulator's only outward dependency. Each chat surface implements it for
its call site, so the state machine stays independent of any UI concerns.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import AssembledMessage
from ..streaming.wire_event import WireEvent


@runtime_checkable
class StreamObserver(Protocol):
    """Receives lifecycle callbacks of one stream, synchronously and in order.

    ``on_delta`` receives the full running text plus the delta that extended
    it. ``on_done`` receives the ``done`` event enriched with the ids captured
    from ``start``. ``on_message`` follows ``on_done`` only when an assistant
    message could be assembled.
    """

    def on_start(self, event: WireEvent) -> None:  # pragma: no cover - interface
        ...

    def on_delta(self, text: str, delta: str) -> None:  # pragma: no cover - interface
        ...

    def on_done(self, event: WireEvent, text: str) -> None:  # pragma: no cover - interface
        ...

    def on_message(self, message: AssembledMessage) -> None:  # pragma: no cover - interface
        ...

    def on_error(self, message: str) -> None:  # pragma: no cover - interface
        ...
