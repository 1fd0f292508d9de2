"""Unit tests for the ``ResponseAccumulator`` state machine.

Events are fed directly; no transport is involved.
"""
from __future__ import annotations

import pytest

from academio_pipe.base.errors import ErrorCode, PipeError
from academio_pipe.base.streaming import (
    CallbackObserver,
    ResponseAccumulator,
    StreamPhase,
    WireEvent,
    WireEventType,
)


def _start(**ids) -> WireEvent:
    return WireEvent(type=WireEventType.START, **ids)


def _token(content) -> WireEvent:
    return WireEvent(type=WireEventType.TOKEN, content=content)


def _done(**ids) -> WireEvent:
    return WireEvent(type=WireEventType.DONE, **ids)


def _error(message=None) -> WireEvent:
    return WireEvent(type=WireEventType.ERROR, error=message)


def test_events_before_begin_are_ignored(recorder):
    acc = ResponseAccumulator(recorder)
    acc.feed(_token("x"))
    assert acc.phase is StreamPhase.IDLE and acc.text == ""  # nosec B101
    assert recorder.calls == []  # nosec B101


def test_tokens_accumulate_and_done_assembles_message(recorder):
    acc = ResponseAccumulator(recorder, session_id="s1")
    acc.begin()
    acc.feed(_start(user_message_id="u1", assistant_message_id="a1"))
    acc.feed(_token("Hel"))
    acc.feed(_token("lo"))
    acc.feed(_done())

    assert acc.phase is StreamPhase.SETTLED  # nosec B101
    assert recorder.kinds() == ["start", "delta", "delta", "done", "message"]  # nosec B101
    assert recorder.calls[1][1:] == ("Hel", "Hel")  # nosec B101
    assert recorder.calls[2][1:] == ("Hello", "lo")  # nosec B101
    done_event, text = recorder.calls[3][1:]
    assert text == "Hello"  # nosec B101
    assert (done_event.user_message_id, done_event.assistant_message_id) == ("u1", "a1")  # nosec B101
    message = recorder.calls[4][1]
    assert (message.id, message.session_id, message.role, message.content) == ("a1", "s1", "assistant", "Hello")  # nosec B101
    assert acc.message is message  # nosec B101


def test_done_id_is_used_when_start_had_none(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_start(session_id="from-server"))
    acc.feed(_token("hi"))
    acc.feed(_done(assistant_message_id="a9"))
    assert acc.message.id == "a9" and acc.message.session_id == "from-server"  # nosec B101


def test_done_without_assistant_id_emits_no_message(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_token("hi"))
    acc.feed(_done())
    assert recorder.kinds() == ["delta", "done"]  # nosec B101
    assert acc.message is None and acc.settled  # nosec B101


def test_consumer_session_wins_over_start_session(recorder):
    acc = ResponseAccumulator(recorder, session_id="mine")
    acc.begin()
    acc.feed(_start(session_id="theirs", assistant_message_id="a1"))
    acc.feed(_done())
    assert acc.message.session_id == "mine"  # nosec B101


def test_empty_token_does_not_notify(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_token(None))
    acc.feed(_token(""))
    assert recorder.calls == [] and acc.text == ""  # nosec B101


def test_error_event_settles_with_default_message(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_token("par"))
    acc.feed(_error())
    acc.feed(_token("tial"))
    acc.feed(_done(assistant_message_id="a1"))

    assert recorder.kinds() == ["delta", "error"]  # nosec B101
    assert acc.state.error == "Unknown error"  # nosec B101
    assert acc.state.error_code == ErrorCode.UPSTREAM_ERROR.value  # nosec B101
    assert acc.text == "par" and acc.message is None  # nosec B101


def test_fail_settles_once_and_ignores_cancellation(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.fail(PipeError(ErrorCode.CANCELLED, "aborted"))
    assert not acc.settled  # nosec B101

    acc.fail(PipeError(ErrorCode.CONNECTION_FAILED, "HTTP 500: Internal Server Error"))
    acc.fail(PipeError(ErrorCode.CONNECTION_FAILED, "second"))
    assert recorder.calls == [("error", "HTTP 500: Internal Server Error")]  # nosec B101
    assert acc.state.error_code == "connection_failed"  # nosec B101


def test_abandon_drops_everything(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_token("A"))
    acc.abandon()
    acc.feed(_token("B"))
    acc.feed(_done(assistant_message_id="a1"))
    acc.fail(PipeError(ErrorCode.CONNECTION_FAILED, "late"))
    assert acc.close() is False  # nosec B101
    assert recorder.kinds() == ["delta"]  # nosec B101
    assert acc.text == "A" and acc.state.error is None  # nosec B101


def test_close_settles_silently(recorder):
    acc = ResponseAccumulator(recorder)
    acc.begin()
    acc.feed(_token("cut"))
    assert acc.close() is True  # nosec B101
    assert acc.close() is False  # nosec B101
    assert acc.phase is StreamPhase.SETTLED  # nosec B101
    assert recorder.kinds() == ["delta"]  # nosec B101
    assert acc.state.error is None and acc.message is None  # nosec B101


def test_begin_is_entered_once():
    acc = ResponseAccumulator()
    acc.begin()
    acc.feed(_token("x"))
    acc.begin()
    assert acc.text == "x" and acc.phase is StreamPhase.STREAMING  # nosec B101


def test_message_is_delivered_when_on_done_raises():
    messages = []

    def _boom(event, text):
        raise RuntimeError("ui bug")

    acc = ResponseAccumulator(CallbackObserver(on_done=_boom, on_message=messages.append), session_id="s1")
    acc.begin()
    acc.feed(_start(assistant_message_id="m1"))
    acc.feed(_token("x"))

    with pytest.raises(RuntimeError, match="ui bug"):
        acc.feed(_done())

    assert acc.settled and acc.state.error is None  # nosec B101
    assert messages == [acc.message] and acc.message.content == "x"  # nosec B101
