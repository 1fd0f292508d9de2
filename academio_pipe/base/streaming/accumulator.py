"""Response accumulator: the per-stream state machine.

Transitions
-----------
``IDLE -> STREAMING``   ``begin()`` at send time (entered once per stream)
``start``               capture ids, ``on_start``; text unchanged
``token``               append content, ``on_delta(full_text, delta)``
``done``                assemble message, ``on_done`` (+ ``on_message``), ``-> SETTLED``
``error`` / ``fail``    record error, ``on_error``, ``-> SETTLED``
``close()``             source ended without a terminal event, ``-> SETTLED`` silently
``abandon()``           retired by cancellation; every later input is dropped

Callbacks run synchronously in the order events are fed. Nothing is delivered
after ``SETTLED`` or after abandonment. An observer that raises while the
stream is still open turns into the error transition (see the session
controller); once settled the outcome stands and ``on_message`` is delivered
even if ``on_done`` raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import ErrorCode, PipeError
from ..models import AssembledMessage
from .observers import BaseStreamObserver
from .stream_state import StreamPhase, StreamState
from .wire_event import WireEvent, WireEventType

if TYPE_CHECKING:
    from ..interfaces import StreamObserver

UNKNOWN_ERROR = "Unknown error"


class ResponseAccumulator:
    """Build the running reply of one stream and notify an observer."""

    def __init__(
        self,
        observer: Optional["StreamObserver"] = None,
        *,
        session_id: Optional[str] = None,
    ) -> None:
        self._observer = observer if observer is not None else BaseStreamObserver()
        self._session_id = session_id
        self.state = StreamState(session_id=session_id)

    # Introspection -------------------------------------------------------
    @property
    def phase(self) -> StreamPhase:
        return self.state.phase

    @property
    def text(self) -> str:
        return self.state.accumulated_text

    @property
    def settled(self) -> bool:
        return self.state.settled

    @property
    def abandoned(self) -> bool:
        return self.state.abandoned

    @property
    def accepting(self) -> bool:
        """Whether fed events are still delivered."""
        return self.state.phase is StreamPhase.STREAMING and not self.state.abandoned

    @property
    def message(self) -> Optional[AssembledMessage]:
        return self.state.message

    # Transitions ---------------------------------------------------------
    def begin(self) -> None:
        """Enter ``STREAMING`` with a fresh state; a second call is ignored."""
        if self.state.phase is not StreamPhase.IDLE or self.state.abandoned:
            return
        self.state.reset(session_id=self._session_id)
        self.state.phase = StreamPhase.STREAMING

    def feed(self, event: WireEvent) -> None:
        if not self.accepting:
            return
        if event.type is WireEventType.START:
            self._on_start(event)
        elif event.type is WireEventType.TOKEN:
            self._on_token(event)
        elif event.type is WireEventType.DONE:
            self._on_done(event)
        elif event.type is WireEventType.ERROR:
            self._settle_error(event.error or UNKNOWN_ERROR, ErrorCode.UPSTREAM_ERROR)

    def fail(self, error: PipeError) -> None:
        """Settle with a transport/connection failure; cancellations are ignored."""
        if not self.accepting or error.is_cancellation:
            return
        self._settle_error(error.message or UNKNOWN_ERROR, error.code)

    def close(self) -> bool:
        """Settle silently after the source ended; ``True`` if it was still open."""
        if not self.accepting:
            return False
        self.state.phase = StreamPhase.SETTLED
        return True

    def abandon(self) -> None:
        self.state.abandoned = True

    # Handlers ------------------------------------------------------------
    def _on_start(self, event: WireEvent) -> None:
        state = self.state
        if event.user_message_id:
            state.user_message_id = event.user_message_id
        if event.assistant_message_id:
            state.assistant_message_id = event.assistant_message_id
        if event.session_id and not state.session_id:
            state.session_id = event.session_id
        self._observer.on_start(event)

    def _on_token(self, event: WireEvent) -> None:
        if not event.content:
            return
        self.state.accumulated_text += event.content
        self._observer.on_delta(self.state.accumulated_text, event.content)

    def _on_done(self, event: WireEvent) -> None:
        state = self.state
        enriched = event.with_ids(
            user_message_id=state.user_message_id,
            assistant_message_id=state.assistant_message_id,
        )
        if enriched.assistant_message_id:
            state.assistant_message_id = enriched.assistant_message_id
            state.message = AssembledMessage(
                id=enriched.assistant_message_id,
                session_id=state.session_id or "",
                content=state.accumulated_text,
            )
        state.phase = StreamPhase.SETTLED
        try:
            self._observer.on_done(enriched, state.accumulated_text)
        finally:
            # on_message is delivered even if on_done raised.
            if state.message is not None:
                self._observer.on_message(state.message)

    def _settle_error(self, message: str, code: ErrorCode) -> None:
        self.state.error = message
        self.state.error_code = code.value
        self.state.phase = StreamPhase.SETTLED
        self._observer.on_error(message)


__all__ = ["ResponseAccumulator", "UNKNOWN_ERROR"]
