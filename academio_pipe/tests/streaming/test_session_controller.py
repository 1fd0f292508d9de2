"""Tests for ``StreamSessionController`` against an in-process transport.

Covers:
- Complete stream, non-200 status and transport failures.
- Single-flight: a new stream supersedes the old one, which goes silent.
- Cancellation: idempotent, closes the response, never reported as an error,
  and drops the rest of the chunk when requested from inside a callback.
- Natural end without a terminal event, the hard ceiling, finalize logging.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import List

import httpx
import pytest

from academio_pipe.base.streaming import (
    CallbackObserver,
    ResponseAccumulator,
    StreamOutcome,
    StreamPhase,
    StreamSessionController,
)
from academio_pipe.base.timeouts import TimeoutConfig


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.payloads: List[dict] = []

    def emit(self, record: logging.LogRecord) -> None:
        # structured events only; tracebacks go out as plain debug lines
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            return
        self.payloads.append(payload)


@pytest.fixture()
def log_records():
    logger = logging.getLogger("academio_pipe.test.controller")
    logger.setLevel(logging.DEBUG)
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield logger, handler.payloads
    finally:
        logger.removeHandler(handler)


async def _wait_for(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.mark.asyncio
async def test_complete_stream_feeds_accumulator(client, server, sse, recorder, log_records):
    logger, payloads = log_records
    server.respond([sse(
        {"type": "start", "assistantMessageId": "a1", "userMessageId": "u1"},
        {"type": "token", "content": "Hel"},
        {"type": "token", "content": "lo"},
        {"type": "done"},
    )])
    controller = StreamSessionController(client, logger=logger)
    acc = ResponseAccumulator(recorder, session_id="s1")

    active = await controller.start_stream("/api/chat/stream", {"sessionId": "s1", "message": "hi"}, acc)

    assert acc.text == "Hello" and acc.message.id == "a1"  # nosec B101
    assert active.outcome is StreamOutcome.COMPLETED  # nosec B101
    assert active.metrics.emitted == 2 and active.metrics.total_duration_ms is not None  # nosec B101
    assert controller.active is None  # nosec B101
    assert server.last_stream.closed  # nosec B101
    request = server.requests[0]
    assert request.method == "GET" and request.url.path == "/api/chat/stream"  # nosec B101
    assert dict(request.url.params) == {"sessionId": "s1", "message": "hi"}  # nosec B101
    events = [p["event"] for p in payloads]
    assert events == ["stream.start", "stream.end"]  # nosec B101
    assert payloads[-1]["emitted_count"] == 2 and payloads[-1]["session_id"] == "s1"  # nosec B101


@pytest.mark.asyncio
async def test_non_200_fails_with_status_message(client, server, recorder, log_records):
    logger, payloads = log_records
    server.respond([b"boom"], status=500)
    acc = ResponseAccumulator(recorder)

    active = await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert recorder.calls == [("error", "HTTP 500: Internal Server Error")]  # nosec B101
    assert acc.state.error_code == "connection_failed"  # nosec B101
    assert active.outcome is StreamOutcome.FAILED  # nosec B101
    assert server.last_stream.closed  # nosec B101
    assert payloads[-1]["event"] == "stream.error"  # nosec B101
    assert payloads[-1]["error_code"] == "connection_failed"  # nosec B101


@pytest.mark.asyncio
async def test_transport_error_is_connection_failed(recorder):
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(base_url="http://academio.test", transport=httpx.MockTransport(_refuse)) as client:
        acc = ResponseAccumulator(recorder)
        await StreamSessionController(client).start_stream("/x", {}, acc)

    assert acc.state.error_code == "connection_failed"  # nosec B101
    assert recorder.calls == [("error", "connection refused")]  # nosec B101


@pytest.mark.asyncio
async def test_upstream_error_event_is_logged_as_stream_error(client, server, sse, recorder, log_records):
    logger, payloads = log_records
    server.respond([sse({"type": "token", "content": "x"}, {"type": "error", "error": "quota"})])
    acc = ResponseAccumulator(recorder)
    await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert acc.state.error == "quota"  # nosec B101
    assert payloads[-1]["event"] == "stream.error"  # nosec B101
    assert payloads[-1]["error_code"] == "upstream_error"  # nosec B101


@pytest.mark.asyncio
async def test_natural_end_without_done_is_truncated(client, server, sse, recorder, log_records):
    logger, payloads = log_records
    server.respond([sse({"type": "token", "content": "cut"}), b'data: {"type":"do'])
    acc = ResponseAccumulator(recorder)
    active = await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert acc.phase is StreamPhase.SETTLED and acc.state.error is None  # nosec B101
    assert recorder.kinds() == ["delta"]  # nosec B101
    assert active.outcome is StreamOutcome.TRUNCATED  # nosec B101
    assert acc.state.diagnostics.discarded_tail == 'data: {"type":"do'  # nosec B101
    assert payloads[-1]["event"] == "stream.truncated"  # nosec B101


@pytest.mark.asyncio
async def test_split_chunks_match_single_chunk(client, server, sse, recorder):
    body = sse(
        {"type": "start", "assistantMessageId": "a1"},
        {"type": "token", "content": "naïve "},
        {"type": "token", "content": "über"},
        {"type": "done"},
    )
    server.respond([body[i:i + 3] for i in range(0, len(body), 3)])
    acc = ResponseAccumulator(recorder)
    await StreamSessionController(client).start_stream("/x", {}, acc)
    assert acc.message.content == "naïve über"  # nosec B101


@pytest.mark.asyncio
async def test_malformed_line_does_not_abort(client, server, sse, recorder):
    seen = []
    server.respond([
        sse({"type": "token", "content": "a"}),
        b"data: {broken\n\n",
        sse({"type": "token", "content": "b"}, {"type": "done", "assistantMessageId": "a1"}),
    ])
    acc = ResponseAccumulator(recorder)
    controller = StreamSessionController(client, on_malformed=lambda line, exc: seen.append(line))
    await controller.start_stream("/x", {}, acc)

    assert acc.message.content == "ab"  # nosec B101
    assert acc.state.diagnostics.malformed_count == 1  # nosec B101
    assert seen == ["data: {broken"]  # nosec B101


@pytest.mark.asyncio
async def test_cancel_mid_stream_closes_response_silently(client, server, sse, recorder, log_records):
    logger, payloads = log_records
    server.respond([sse({"type": "start", "assistantMessageId": "a1"}, {"type": "token", "content": "A"})], hang=True)
    controller = StreamSessionController(client, logger=logger)
    acc = ResponseAccumulator(recorder)

    task = asyncio.ensure_future(controller.start_stream("/x", {}, acc))
    await _wait_for(lambda: acc.text == "A")
    assert controller.active is not None  # nosec B101

    assert controller.cancel() is True  # nosec B101
    assert controller.cancel() is False  # nosec B101
    active = await task

    assert recorder.kinds() == ["start", "delta"]  # nosec B101
    assert acc.state.error is None and acc.abandoned  # nosec B101
    assert active.outcome is StreamOutcome.CANCELLED  # nosec B101
    assert active.token.cancelled and active.token.released  # nosec B101
    assert server.last_stream.closed  # nosec B101
    assert payloads[-1]["event"] == "stream.cancelled"  # nosec B101


@pytest.mark.asyncio
async def test_cancel_without_active_stream_is_noop(client):
    controller = StreamSessionController(client)
    assert controller.cancel() is False  # nosec B101
    assert controller.cancel("again") is False  # nosec B101


@pytest.mark.asyncio
async def test_new_stream_supersedes_previous(client, server, sse, recorder):
    first_recorder = type(recorder)()
    server.respond([sse({"type": "token", "content": "old"})], hang=True)
    server.respond([sse({"type": "token", "content": "new"}, {"type": "done", "assistantMessageId": "a2"})])
    controller = StreamSessionController(client)
    first = ResponseAccumulator(first_recorder)
    second = ResponseAccumulator(recorder)

    first_task = asyncio.ensure_future(controller.start_stream("/x", {}, first))
    await _wait_for(lambda: first.text == "old")
    await controller.start_stream("/x", {}, second)
    first_active = await first_task

    assert first_active.outcome is StreamOutcome.CANCELLED  # nosec B101
    assert first.abandoned and first_recorder.kinds() == ["delta"]  # nosec B101
    assert server.streams[0].closed  # nosec B101
    assert second.message.content == "new"  # nosec B101
    assert recorder.kinds() == ["delta", "done", "message"]  # nosec B101


@pytest.mark.asyncio
async def test_cancel_from_callback_drops_rest_of_chunk(client, server, sse):
    controller = StreamSessionController(client)
    deltas = []

    class _CancelOnFirstDelta:
        def on_start(self, event):
            pass

        def on_delta(self, text, delta):
            deltas.append(delta)
            controller.cancel("user pressed stop")

        def on_done(self, event, text):
            deltas.append("DONE")

        def on_message(self, message):
            pass

        def on_error(self, message):
            deltas.append("ERROR")

    server.respond([sse(
        {"type": "token", "content": "A"},
        {"type": "token", "content": "B"},
        {"type": "done", "assistantMessageId": "a1"},
    )])
    acc = ResponseAccumulator(_CancelOnFirstDelta())
    active = await controller.start_stream("/x", {}, acc)

    assert deltas == ["A"]  # nosec B101
    assert active.outcome is StreamOutcome.CANCELLED  # nosec B101
    assert acc.state.error is None  # nosec B101


@pytest.mark.asyncio
async def test_cancelling_the_caller_cancels_the_stream(client, server, sse):
    server.respond([sse({"type": "token", "content": "A"})], hang=True)
    controller = StreamSessionController(client)
    acc = ResponseAccumulator()

    task = asyncio.ensure_future(controller.start_stream("/x", {}, acc))
    await _wait_for(lambda: acc.text == "A")
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await _wait_for(lambda: server.last_stream.closed)

    assert acc.abandoned and controller.active is None  # nosec B101


@pytest.mark.asyncio
async def test_stream_ceiling_settles_with_timeout(client, server, sse, recorder):
    server.respond([sse({"type": "token", "content": "slow"})], hang=True)
    controller = StreamSessionController(client, timeout_config=TimeoutConfig(stream_ceiling_seconds=0.05))
    acc = ResponseAccumulator(recorder)

    active = await controller.start_stream("/x", {}, acc)

    assert active.outcome is StreamOutcome.FAILED  # nosec B101
    assert acc.state.error_code == "timeout"  # nosec B101
    assert acc.state.error == "Stream exceeded 0.05s"  # nosec B101
    assert recorder.kinds() == ["delta", "error"]  # nosec B101
    assert server.last_stream.closed  # nosec B101


def _raise_ui_bug(*_args) -> None:
    raise RuntimeError("ui bug")


@pytest.mark.asyncio
async def test_observer_failure_mid_stream_settles_with_error(client, server, sse, log_records):
    logger, payloads = log_records
    server.respond([sse(
        {"type": "start", "assistantMessageId": "a1"},
        {"type": "token", "content": "a"},
        {"type": "token", "content": "b"},
        {"type": "done"},
    )])
    errors = []
    acc = ResponseAccumulator(CallbackObserver(on_delta=_raise_ui_bug, on_error=errors.append))

    active = await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert active.outcome is StreamOutcome.FAILED  # nosec B101
    assert errors == ["ui bug"] and acc.state.error == "ui bug"  # nosec B101
    assert acc.message is None and acc.text == "a"  # nosec B101
    assert server.last_stream.closed  # nosec B101
    assert payloads[-1]["event"] == "stream.error"  # nosec B101


@pytest.mark.asyncio
async def test_observer_failure_after_done_keeps_completed_outcome(client, server, sse, log_records):
    logger, payloads = log_records
    server.respond([sse(
        {"type": "start", "assistantMessageId": "m1"},
        {"type": "token", "content": "x"},
        {"type": "done"},
    )])
    messages, errors = [], []
    acc = ResponseAccumulator(
        CallbackObserver(on_done=_raise_ui_bug, on_message=messages.append, on_error=errors.append),
        session_id="s1",
    )

    active = await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert active.outcome is StreamOutcome.COMPLETED  # nosec B101
    assert messages == [acc.message] and acc.message.id == "m1"  # nosec B101
    assert errors == [] and acc.state.error is None  # nosec B101
    events = [p["event"] for p in payloads]
    assert events[-2:] == ["stream.observer_error", "stream.end"]  # nosec B101
    assert payloads[-2]["error"] == "ui bug"  # nosec B101
    assert payloads[-1]["outcome"] == "completed" and payloads[-1]["message_emitted"] is True  # nosec B101


@pytest.mark.asyncio
async def test_raising_error_callback_does_not_escape(client, server, log_records):
    logger, payloads = log_records
    server.respond([b"boom"], status=500)
    acc = ResponseAccumulator(CallbackObserver(on_error=_raise_ui_bug))

    active = await StreamSessionController(client, logger=logger).start_stream("/x", {}, acc)

    assert active.outcome is StreamOutcome.FAILED  # nosec B101
    assert acc.state.error == "HTTP 500: Internal Server Error"  # nosec B101
    events = [p["event"] for p in payloads]
    assert events[-2:] == ["stream.observer_error", "stream.error"]  # nosec B101
