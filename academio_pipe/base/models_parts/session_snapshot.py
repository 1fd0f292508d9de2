"""
Session snapshot returned by the persistence collaborator.

Holds the session record, its prior messages, and the remaining payload keys
(``homework``, ``lesson`` ...) untouched for the surface that asked for it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .chat_message import ChatMessage


@dataclass
class SessionSnapshot:
    session: Optional[Dict[str, Any]] = None
    messages: List[ChatMessage] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def session_id(self) -> str:
        return str((self.session or {}).get("id") or "")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionSnapshot":
        session = data.get("session")
        raw_messages = data.get("messages") or []
        return cls(
            session=dict(session) if isinstance(session, Mapping) else None,
            messages=[ChatMessage.from_dict(m) for m in raw_messages if isinstance(m, Mapping)],
            payload={k: v for k, v in data.items() if k not in ("session", "messages")},
        )


__all__ = ["SessionSnapshot"]
