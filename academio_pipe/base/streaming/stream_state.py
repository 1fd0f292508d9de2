"""Observable state of one consumer's stream.

``StreamState`` is owned by a single accumulator; readers (the façade, the
surfaces, tests) only inspect it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..models import AssembledMessage
from .stream_diagnostics import StreamDiagnostics


class StreamPhase(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    SETTLED = "settled"


@dataclass
class StreamState:
    """Phase, running reply text and terminal outcome of a stream.

    ``accumulated_text`` only grows while ``STREAMING``; ``reset`` is the only
    way to shrink it. ``error`` is set exclusively by upstream/connection
    failures, never by cancellation.
    """

    phase: StreamPhase = StreamPhase.IDLE
    accumulated_text: str = ""
    error: Optional[str] = None
    error_code: Optional[str] = None
    session_id: Optional[str] = None
    user_message_id: Optional[str] = None
    assistant_message_id: Optional[str] = None
    message: Optional[AssembledMessage] = None
    abandoned: bool = False
    diagnostics: StreamDiagnostics = field(default_factory=StreamDiagnostics)

    @property
    def settled(self) -> bool:
        return self.phase is StreamPhase.SETTLED

    def reset(self, session_id: Optional[str] = None) -> None:
        self.phase = StreamPhase.IDLE
        self.accumulated_text = ""
        self.error = None
        self.error_code = None
        self.session_id = session_id
        self.user_message_id = None
        self.assistant_message_id = None
        self.message = None
        self.abandoned = False
        self.diagnostics = StreamDiagnostics()


__all__ = ["StreamPhase", "StreamState"]
