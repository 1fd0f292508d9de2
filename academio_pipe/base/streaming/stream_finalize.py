"""Finalize logging for a stream.

Emits exactly one lifecycle event per stream with the consolidated metrics and
diagnostics, whatever path the read loop exited through.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import PipeError
from ..logging import LogContext, normalized_log_event
from .active_stream import StreamOutcome
from .stream_metrics import StreamMetrics
from .stream_state import StreamState

_EVENT_NAMES = {
    StreamOutcome.COMPLETED: "stream.end",
    StreamOutcome.TRUNCATED: "stream.truncated",
    StreamOutcome.FAILED: "stream.error",
    StreamOutcome.CANCELLED: "stream.cancelled",
}


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    state: StreamState,
    outcome: StreamOutcome,
    error: Optional[PipeError] = None,
) -> None:
    """Log the terminal event of a stream.

    A stream that completed by an upstream ``error`` event is reported as
    ``stream.error`` carrying the state's error code.
    """
    event = _EVENT_NAMES[outcome]
    error_code = error.code.value if error is not None else None
    error_text = error.message if error is not None else None
    if outcome is StreamOutcome.COMPLETED and state.error is not None:
        event = "stream.error"
        error_code = state.error_code
        error_text = state.error
    level = logging.WARNING if event in ("stream.error", "stream.truncated") else logging.INFO
    diagnostics = state.diagnostics
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        error_code=error_code,
        level=level,
        outcome=outcome.value,
        emitted_count=metrics.emitted,
        chunks=metrics.chunks,
        bytes_received=metrics.bytes_received,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        malformed_count=diagnostics.malformed_count or None,
        unrecognized_count=diagnostics.unrecognized_count or None,
        discarded_tail_len=len(diagnostics.discarded_tail) or None,
        message_emitted=state.message is not None,
        error=error_text,
        failure_class=error.raw.__class__.__name__ if error is not None and error.raw is not None else None,
    )


__all__ = ["finalize_stream"]
