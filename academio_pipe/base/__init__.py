"""
Pipe Base Package

Exports the surface-agnostic core of the streaming pipe for the chat surfaces
and the CLI:
- Streaming: frame decoder, event parser, accumulator, session controller
- Façade: ``AIPipe``
- Errors, cancellation, timeouts and structured logging
- Models and DTOs: serialization-friendly messages and request validation
- HTTP collaborators: client factory, bearer auth, session snapshots
"""

from .errors import ErrorCode, PipeError, classify_exception
from .cancellation import CancellationToken, CancelledError
from .timeouts import TimeoutConfig, get_timeout_config
from .models import AssembledMessage, ChatMessage, SessionSnapshot
from .streaming import (
    EventParser,
    FrameDecoder,
    ResponseAccumulator,
    StreamDiagnostics,
    StreamPhase,
    StreamSessionController,
    StreamState,
    WireEvent,
    WireEventType,
)
from .interfaces import SessionService, StreamObserver
from .http import AuthEvents, BearerTokenAuth, HttpSessionService, build_async_client
from .pipe import AIPipe

__all__ = [
    # Errors
    "ErrorCode",
    "PipeError",
    "classify_exception",
    # Cancellation / timeouts
    "CancellationToken",
    "CancelledError",
    "TimeoutConfig",
    "get_timeout_config",
    # Models
    "AssembledMessage",
    "ChatMessage",
    "SessionSnapshot",
    # Streaming
    "EventParser",
    "FrameDecoder",
    "ResponseAccumulator",
    "StreamDiagnostics",
    "StreamPhase",
    "StreamSessionController",
    "StreamState",
    "WireEvent",
    "WireEventType",
    # Interfaces
    "SessionService",
    "StreamObserver",
    # HTTP
    "AuthEvents",
    "BearerTokenAuth",
    "HttpSessionService",
    "build_async_client",
    # Façade
    "AIPipe",
]
