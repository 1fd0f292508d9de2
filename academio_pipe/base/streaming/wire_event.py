"""Typed wire events decoded from payload lines.

Keeps the discriminated event record separate from the parser so the
accumulator and observers depend only on this small module.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class WireEventType(str, Enum):
    START = "start"
    TOKEN = "token"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class WireEvent:
    """One decoded payload.

    Fields:
      type: discriminating tag
      content: token text (``token`` events)
      error: server-supplied failure message (``error`` events)
      session_id / user_message_id / assistant_message_id: ids announced by
        ``start`` (and, for the assistant id, optionally by ``done``)
    """

    type: WireEventType
    content: Optional[str] = None
    error: Optional[str] = None
    session_id: Optional[str] = None
    user_message_id: Optional[str] = None
    assistant_message_id: Optional[str] = None

    def with_ids(
        self,
        *,
        user_message_id: Optional[str],
        assistant_message_id: Optional[str],
    ) -> "WireEvent":
        """Return a copy whose missing ids are filled from the given captures."""
        return replace(
            self,
            user_message_id=self.user_message_id or user_message_id,
            assistant_message_id=self.assistant_message_id or assistant_message_id,
        )


__all__ = ["WireEvent", "WireEventType"]
