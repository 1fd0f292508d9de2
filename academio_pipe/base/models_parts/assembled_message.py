"""
Assembled assistant message.

The externally visible artifact of a stream that reached ``done``. It is built
in one step from the ``done`` event and the final accumulated text and is never
emitted partially.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal

from .timestamps import utc_timestamp


@dataclass(frozen=True)
class AssembledMessage:
    """A completed assistant reply.

    Attributes:
        id: Assistant message id announced by the server.
        session_id: Chat session the reply belongs to (may be empty when the
            consumer has no session, e.g. before a homework snapshot loads).
        content: Full reply text, the in-order concatenation of token contents.
        timestamp: ISO-8601 UTC creation time.
        role: Always ``"assistant"``.
    """

    id: str
    session_id: str
    content: str
    timestamp: str = field(default_factory=utc_timestamp)
    role: Literal["assistant"] = "assistant"

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase wire shape used by the chat server and UI."""
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }


__all__ = ["AssembledMessage"]
