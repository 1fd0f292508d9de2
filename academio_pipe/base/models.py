"""
Data models shared by the pipe, the surfaces and the HTTP layer.

Re-exports the single-class modules under ``models_parts`` for a stable import path.
"""
from __future__ import annotations

from .models_parts import AssembledMessage, ChatMessage, Role, SessionSnapshot, utc_timestamp

__all__ = ["AssembledMessage", "ChatMessage", "Role", "SessionSnapshot", "utc_timestamp"]
