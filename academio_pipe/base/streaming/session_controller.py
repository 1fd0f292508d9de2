"""StreamSessionController: single-flight owner of the active stream.

Starting a stream first cancels whatever stream is outstanding, so a new
request never interleaves its events with a previous one. Each stream runs as
its own task; cancelling the task is what closes the response (the
``async with`` around the request unwinds on every exit path). The token only
records intent and lets the read loop stop when cancellation is requested
from inside an observer callback.

Read loop
---------
1. Issue the GET and reject any non-200 status as ``CONNECTION_FAILED``.
2. Feed each chunk to the ``FrameDecoder``; parse every completed line.
3. Feed parsed events to the accumulator in order; stop once it settles.
4. At natural end, discard the unterminated tail and close the accumulator.
5. Log exactly one terminal lifecycle event (see ``finalize_stream``).

An observer exception while the stream is open settles it with that error. One
raised while the terminal event is delivered leaves the settled outcome as is
and is logged as ``stream.observer_error``.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Mapping, Optional

import httpx

from ..cancellation import CancellationToken, CancelledError
from ..errors import ErrorCode, PipeError, classify_exception, connection_failed
from ..logging import LogContext, log_event, normalized_log_event
from ..timeouts import TimeoutConfig, get_timeout_config
from ...config.defaults import DEFAULT_DATA_PREFIX
from .accumulator import ResponseAccumulator
from .active_stream import ActiveStream, StreamOutcome
from .event_parser import EventParser, MalformedHook
from .frame_decoder import FrameDecoder
from .stream_finalize import finalize_stream
from .wire_event import WireEventType


class StreamSessionController:
    """Run at most one stream at a time against ``client``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        prefix: str = DEFAULT_DATA_PREFIX,
        timeout_config: Optional[TimeoutConfig] = None,
        on_malformed: Optional[MalformedHook] = None,
        logger: Optional[logging.Logger] = None,
        surface: Optional[str] = None,
    ) -> None:
        self._client = client
        self._prefix = prefix
        self._timeouts = timeout_config
        self._on_malformed = on_malformed
        self._logger = logger or logging.getLogger("academio_pipe.streaming")
        self._surface = surface
        self._active: Optional[ActiveStream] = None

    @property
    def active(self) -> Optional[ActiveStream]:
        """The outstanding stream, or ``None`` when idle."""
        return self._active

    @property
    def busy(self) -> bool:
        return self._active is not None

    async def start_stream(
        self,
        target: str,
        params: Mapping[str, str],
        accumulator: ResponseAccumulator,
    ) -> ActiveStream:
        """Supersede any outstanding stream and run a new one to completion.

        Returns once the stream has settled, was cancelled or was superseded.
        Failures are delivered through the accumulator, never raised. If the
        awaiting caller is itself cancelled the stream is cancelled too.
        """
        self.cancel("superseded by a new stream")
        active = ActiveStream(
            stream_id=uuid.uuid4().hex[:12],
            target=target,
            token=CancellationToken(),
            accumulator=accumulator,
        )
        self._active = active
        accumulator.begin()
        task = asyncio.ensure_future(self._run(active, dict(params)))
        active.attach_task(task)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            if self._active is active:
                self.cancel("caller cancelled")
            raise
        finally:
            if self._active is active:
                self._active = None
        if not task.cancelled():
            task.result()
        return active

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Cancel the outstanding stream; ``False`` when there was none.

        The stream's accumulator is retired first so no event already in
        flight reaches its observer. Safe to call repeatedly.
        """
        active = self._active
        if active is None:
            return False
        self._active = None
        active.accumulator.abandon()
        active.token.cancel(reason or "cancelled by caller")
        return True

    # Internal ------------------------------------------------------------
    def _timeout_config(self) -> TimeoutConfig:
        return self._timeouts if self._timeouts is not None else get_timeout_config()

    def _fail(self, active: ActiveStream, error: PipeError, ctx: LogContext) -> None:
        try:
            active.accumulator.fail(error)
        except Exception as exc:  # noqa: BLE001 - the stream is settled with ``error``
            self._observer_failed(active, exc, ctx)

    def _observer_failed(self, active: ActiveStream, exc: Exception, ctx: LogContext) -> None:
        """Record an observer that raised after the stream had settled."""
        log_event(
            self._logger,
            "stream.observer_error",
            ctx,
            level=logging.WARNING,
            error=str(exc) or exc.__class__.__name__,
            exc_type=exc.__class__.__name__,
        )
        self._logger.debug("stream %s observer failed", active.stream_id, exc_info=exc)

    async def _run(self, active: ActiveStream, params: dict) -> None:
        accumulator = active.accumulator
        state = accumulator.state
        ctx = LogContext(
            target=active.target,
            stream_id=active.stream_id,
            session_id=state.session_id,
            surface=self._surface,
        )
        decoder = FrameDecoder()
        parser = EventParser(
            prefix=self._prefix,
            diagnostics=state.diagnostics,
            on_malformed=self._on_malformed,
            logger=self._logger,
            ctx=ctx,
        )
        ceiling = self._timeout_config().stream_ceiling_seconds
        error: Optional[PipeError] = None
        outcome = StreamOutcome.COMPLETED
        t0 = time.perf_counter()
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            emitted=False,
            params=sorted(params),
            ceiling_seconds=ceiling,
        )
        try:
            reader = self._read(active, params, decoder, parser, t0)
            if ceiling:
                await asyncio.wait_for(reader, timeout=ceiling)
            else:
                await reader
            tail = decoder.finish()
            if tail.strip():
                state.diagnostics.discarded_tail = tail
            if accumulator.close():
                outcome = StreamOutcome.TRUNCATED
        except asyncio.CancelledError:
            outcome = StreamOutcome.CANCELLED
            raise
        except CancelledError:
            outcome = StreamOutcome.CANCELLED
        except asyncio.TimeoutError as exc:
            if active.token.cancelled:
                outcome = StreamOutcome.CANCELLED
            else:
                outcome = StreamOutcome.FAILED
                error = PipeError(
                    code=ErrorCode.TIMEOUT,
                    message=f"Stream exceeded {ceiling:g}s" if ceiling else "Stream timed out",
                    target=active.target,
                    raw=exc,
                )
                self._fail(active, error, ctx)
        except Exception as exc:  # noqa: BLE001 - routed to the accumulator
            if active.token.cancelled:
                outcome = StreamOutcome.CANCELLED
            elif accumulator.settled:
                self._observer_failed(active, exc, ctx)
            else:
                outcome = StreamOutcome.FAILED
                error = exc if isinstance(exc, PipeError) else PipeError(
                    code=classify_exception(exc),
                    message=str(exc) or exc.__class__.__name__,
                    target=active.target,
                    raw=exc,
                )
                if not isinstance(exc, PipeError):
                    self._logger.debug("stream %s failed", active.stream_id, exc_info=exc)
                self._fail(active, error, ctx)
        finally:
            active.token.release()
            active.outcome = outcome
            active.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
            finalize_stream(
                logger=self._logger,
                ctx=ctx,
                metrics=active.metrics,
                state=state,
                outcome=outcome,
                error=error,
            )

    async def _read(
        self,
        active: ActiveStream,
        params: dict,
        decoder: FrameDecoder,
        parser: EventParser,
        t0: float,
    ) -> None:
        token = active.token
        accumulator = active.accumulator
        metrics = active.metrics
        async with self._client.stream(
            "GET",
            active.target,
            params=params,
            timeout=self._timeout_config().stream_timeout(),
        ) as response:
            active.response = response
            if response.status_code != 200:
                raise connection_failed(response, active.target)
            async for chunk in response.aiter_bytes():
                token.raise_if_cancelled()
                metrics.chunks += 1
                metrics.bytes_received += len(chunk)
                for line in decoder.feed(chunk):
                    event = parser.parse(line)
                    if event is None:
                        continue
                    token.raise_if_cancelled()
                    if event.type is WireEventType.TOKEN and event.content and accumulator.accepting:
                        metrics.emitted += 1
                        if metrics.time_to_first_token_ms is None:
                            metrics.time_to_first_token_ms = (time.perf_counter() - t0) * 1000.0
                    accumulator.feed(event)
                    if accumulator.settled:
                        return


__all__ = ["StreamSessionController"]
