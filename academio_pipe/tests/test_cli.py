"""CLI tests: dry-run planning, usage errors and a streamed run over a mock transport."""

from __future__ import annotations

import functools
import json

import pytest

from academio_pipe.base.pipe import AIPipe
from academio_pipe.service.cli import main, plan_request
from academio_pipe.service.cli import cli_actions
from academio_pipe.service.cli.cli_actions import UsageError, run_stream


def test_plan_chat_request_prints_json(capsys):
    code = main(
        [
            "plan",
            "--session-id",
            "s1",
            "--message",
            "Explain",
            "--attachment",
            "notes.pdf text",
            "--base-url",
            "http://academio.test",
        ]
    )
    out = json.loads(capsys.readouterr().out)
    assert code == 0  # nosec B101
    assert out["target"] == "/api/chat/stream"  # nosec B101
    assert out["base_url"] == "http://academio.test"  # nosec B101
    assert out["params"] == {  # nosec B101
        "sessionId": "s1",
        "message": "Explain\n\n[Attached content: notes.pdf text]",
    }
    assert out["auth_token_present"] is False  # nosec B101


def test_plan_request_per_surface(monkeypatch):
    monkeypatch.setenv("ACADEMIO_TOKEN", "jwt")
    hw = plan_request(surface="homework", message="Why?", item_id="ph1", question_context="Q2")
    assert hw["target"] == "/api/student/homework-chat/stream"  # nosec B101
    assert hw["params"] == {"homeworkId": "ph1", "message": "Why?", "questionContext": "Q2"}  # nosec B101
    assert hw["auth_token_present"] is True  # nosec B101

    lesson = plan_request(surface="lesson", message="Hi", item_id="pl1")
    assert lesson["params"] == {"lessonId": "pl1", "message": "Hi"}  # nosec B101

    teacher = plan_request(surface="teacher", message="Draft", session_id="t1", material_type="test")
    assert teacher["target"] == "/api/teacher/chat/stream"  # nosec B101
    assert teacher["params"]["materialType"] == "test"  # nosec B101


def test_plan_request_requires_surface_id():
    with pytest.raises(UsageError):
        plan_request(surface="homework", message="x")
    with pytest.raises(UsageError):
        plan_request(surface="chat", message="x")


def test_main_reports_usage_errors(capsys):
    assert main(["plan", "--surface", "lesson", "--message", "hi"]) == 2  # nosec B101
    assert "--item-id" in capsys.readouterr().err  # nosec B101

    assert main(["--session-id", "s1"]) == 2  # nosec B101
    assert "--message is required" in capsys.readouterr().err  # nosec B101


@pytest.mark.asyncio
async def test_run_stream_summary_with_injected_pipe(client, server, sse):
    server.respond([sse(
        {"type": "start", "assistantMessageId": "a9"},
        {"type": "token", "content": "4"},
        {"type": "done"},
    ) + b"data: not-json\n\n"])
    plan = plan_request(surface="chat", message="2+2?", session_id="s1")

    summary = await run_stream(plan, live=False, pipe=AIPipe(client=client))

    assert summary["ok"] is True and summary["error"] is None  # nosec B101
    assert summary["content"] == "4"  # nosec B101
    assert summary["message"]["id"] == "a9" and summary["message"]["sessionId"] == "s1"  # nosec B101
    assert server.requests[0].url.params["message"] == "2+2?"  # nosec B101


def test_main_stream_json_over_mock_transport(monkeypatch, capsys, transport, server, sse):
    server.respond([sse({"type": "token", "content": "ok"}, {"type": "error", "error": "model down"})])
    monkeypatch.setattr(cli_actions, "AIPipe", functools.partial(AIPipe, transport=transport))

    code = main(["stream", "--session-id", "s1", "--message", "hi", "--json"])

    summary = json.loads(capsys.readouterr().out)
    assert code == 1  # nosec B101
    assert summary == {  # nosec B101
        "ok": False,
        "error": "model down",
        "message": None,
        "content": "ok",
        "malformed_lines": 0,
    }
