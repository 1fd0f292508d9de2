"""Streaming metrics data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single stream.

    ``emitted`` counts token events delivered to the observer;
    ``time_to_first_token_ms`` is measured from request start to the first of
    them; ``total_duration_ms`` is set at teardown on every exit path.
    """

    emitted: int = 0
    chunks: int = 0
    bytes_received: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None


__all__ = ["StreamMetrics"]
