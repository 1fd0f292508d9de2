"""Streaming package of the pipe.

Exposes the decode pipeline (frame decoder, event parser), the accumulator
state machine and the single-flight session controller under one namespace.
"""

from .wire_event import WireEvent, WireEventType
from .frame_decoder import FrameDecoder
from .stream_diagnostics import StreamDiagnostics
from .event_parser import EventParser, MalformedHook
from .stream_state import StreamPhase, StreamState
from .stream_metrics import StreamMetrics
from .observers import BaseStreamObserver, CallbackObserver, FanOutObserver
from .accumulator import ResponseAccumulator
from .active_stream import ActiveStream, StreamOutcome
from .stream_finalize import finalize_stream
from .session_controller import StreamSessionController

__all__ = [
    "WireEvent",
    "WireEventType",
    "FrameDecoder",
    "StreamDiagnostics",
    "EventParser",
    "MalformedHook",
    "StreamPhase",
    "StreamState",
    "StreamMetrics",
    "BaseStreamObserver",
    "CallbackObserver",
    "FanOutObserver",
    "ResponseAccumulator",
    "ActiveStream",
    "StreamOutcome",
    "finalize_stream",
    "StreamSessionController",
]
