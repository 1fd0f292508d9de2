"""Structured logging context object for the streaming pipe.

This module defines :class:`LogContext`, a dataclass carrying the common fields
of pipe logging events (endpoint target, stream id, chat session id and extra
metadata). ``to_dict`` merges ``extra`` and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for pipe logging events."""

    target: Optional[str] = None
    stream_id: Optional[str] = None
    session_id: Optional[str] = None
    surface: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
