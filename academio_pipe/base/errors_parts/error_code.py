"""
Normalized pipe error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the streaming pipe, the chat
surfaces and the HTTP layer. Values are lowercase snake_case and are a stable
contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CONNECTION_FAILED = "connection_failed"
    MALFORMED_EVENT = "malformed_event"
    UPSTREAM_ERROR = "upstream_error"
    CANCELLED = "cancelled"
    BUSY = "busy"
    TIMEOUT = "timeout"
    AUTH = "auth"
    VALIDATION = "validation"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
