"""Handle of one outstanding request-and-decode pipeline.

Owned exclusively by ``StreamSessionController``; at most one exists per
controller at any time.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import httpx

from ..cancellation import CancellationToken
from .accumulator import ResponseAccumulator
from .stream_metrics import StreamMetrics


class StreamOutcome(str, Enum):
    """How the read loop exited."""

    COMPLETED = "completed"
    TRUNCATED = "truncated"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class ActiveStream:
    stream_id: str
    target: str
    token: CancellationToken
    accumulator: ResponseAccumulator
    metrics: StreamMetrics = field(default_factory=StreamMetrics)
    task: Optional["asyncio.Task[None]"] = None
    response: Optional[httpx.Response] = None
    outcome: Optional[StreamOutcome] = None

    def attach_task(self, task: "asyncio.Task[None]") -> None:
        """Bind the read-loop task; cancelling the token then cancels the task."""
        self.task = task
        self.token.add_callback(self._cancel_task)

    @property
    def live(self) -> bool:
        return self.task is not None and not self.task.done()

    def _cancel_task(self) -> None:
        task = self.task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # From inside the read loop (an observer cancelling) the loop polls the
        # token itself; cancelling our own task would interrupt its teardown.
        if task is not current:
            task.cancel()


__all__ = ["ActiveStream", "StreamOutcome"]
