"""
Chat history message used by the homework and lesson surfaces.

Unlike :class:`AssembledMessage` this covers both roles and carries the optional
question context a homework message was sent with.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional

from .assembled_message import AssembledMessage
from .timestamps import utc_timestamp

Role = Literal["user", "assistant"]


@dataclass
class ChatMessage:
    """A single entry of a chat transcript."""

    id: str
    session_id: str
    role: Role
    content: str
    timestamp: str = field(default_factory=utc_timestamp)
    question_context: Optional[str] = None

    @classmethod
    def from_assembled(cls, message: AssembledMessage) -> "ChatMessage":
        return cls(
            id=message.id,
            session_id=message.session_id,
            role="assistant",
            content=message.content,
            timestamp=message.timestamp,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatMessage":
        """Build from the server's camelCase JSON shape.

        Any role other than ``"assistant"`` is treated as a user message.
        """
        role: Role = "assistant" if data.get("role") == "assistant" else "user"
        return cls(
            id=str(data.get("id") or ""),
            session_id=str(data.get("sessionId") or ""),
            role=role,
            content=str(data.get("content") or ""),
            timestamp=str(data.get("timestamp") or data.get("createdAt") or utc_timestamp()),
            question_context=data.get("questionContext") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "sessionId": self.session_id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        if self.question_context:
            out["questionContext"] = self.question_context
        return out


__all__ = ["ChatMessage", "Role"]
