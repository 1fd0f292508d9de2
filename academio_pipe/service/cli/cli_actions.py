"""CLI action handlers.

Purpose
-------
Translate parsed arguments into a pipe request and run it. ``plan`` builds the
request without any network I/O; ``stream`` runs it through ``AIPipe`` and
prints tokens as they arrive (or one JSON summary with ``--json``).

Exit codes
----------
- ``0``: the stream completed (or the plan was printed).
- ``1``: the stream failed; the error is printed as JSON to stderr.
- ``2``: invalid arguments for the chosen surface.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional

from ...base.errors import PipeError
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.pipe import AIPipe
from ...base.timeouts import get_timeout_config
from ...chat import compose_message
from ...config import get_pipe_config
from ...config.defaults import (
    CHAT_STREAM_PATH,
    HOMEWORK_CHAT_STREAM_PATH,
    LESSON_CHAT_STREAM_PATH,
    TEACHER_CHAT_STREAM_PATH,
)


class UsageError(ValueError):
    """Arguments do not describe a valid request for the chosen surface."""


def plan_request(
    *,
    surface: str,
    message: Optional[str],
    session_id: Optional[str] = None,
    item_id: Optional[str] = None,
    attachment: Optional[str] = None,
    student_id: Optional[str] = None,
    question_context: Optional[str] = None,
    material_type: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Compute the request a surface would issue, without I/O.

    Raises
    ------
    UsageError
        When the id the surface needs is missing.
    """
    if surface in ("chat", "teacher"):
        if not session_id:
            raise UsageError(f"--session-id is required for the {surface} surface")
        if surface == "chat":
            target = CHAT_STREAM_PATH
            params = {
                "sessionId": session_id,
                "message": compose_message(message or "", attachment),
                "studentId": student_id,
            }
        else:
            target = TEACHER_CHAT_STREAM_PATH
            params = {"sessionId": session_id, "message": message or "", "materialType": material_type}
    elif surface in ("homework", "lesson"):
        if not item_id:
            raise UsageError(f"--item-id is required for the {surface} surface")
        if surface == "homework":
            target = HOMEWORK_CHAT_STREAM_PATH
            params = {"homeworkId": item_id, "message": message or "", "questionContext": question_context}
        else:
            target = LESSON_CHAT_STREAM_PATH
            params = {"lessonId": item_id, "message": message or ""}
    else:
        raise UsageError(f"unknown surface '{surface}'")

    cfg = get_pipe_config({"base_url": base_url})
    return {
        "surface": surface,
        "base_url": cfg["base_url"],
        "target": target,
        "params": {k: v for k, v in params.items() if v is not None},
        "session_id": session_id,
        "auth_token_present": bool(cfg.get("auth_token")),
        "stream_ceiling_seconds": get_timeout_config().stream_ceiling_seconds,
    }


def _plan_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return plan_request(
        surface=args.surface,
        message=args.message,
        session_id=args.session_id,
        item_id=args.item_id,
        attachment=args.attachment,
        student_id=args.student_id,
        question_context=args.question_context,
        material_type=args.material_type,
        base_url=args.base_url,
    )


def handle_plan(args: argparse.Namespace) -> int:
    """Print the dry-run plan as JSON."""
    try:
        plan = _plan_from_args(args)
    except UsageError as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 2
    print(json.dumps(plan))
    return 0


async def run_stream(plan: Dict[str, Any], *, live: bool, pipe: Optional[AIPipe] = None) -> Dict[str, Any]:
    """Stream the planned request and return a JSON-serializable summary.

    ``pipe`` may be injected (tests pass one over a mock transport); a pipe
    created here is closed before returning.
    """

    def _print_delta(_text: str, delta: str) -> None:
        sys.stdout.write(delta)
        sys.stdout.flush()

    owned = pipe is None
    if pipe is None:
        pipe = AIPipe(base_url=plan["base_url"], on_delta=_print_delta if live else None, surface=plan["surface"])
    try:
        message = await pipe.send(plan["target"], plan["params"], session_id=plan.get("session_id"))
    finally:
        if owned:
            await pipe.aclose()
    if live:
        sys.stdout.write("\n")
    return {
        "ok": pipe.error is None,
        "error": pipe.error,
        "message": message.to_dict() if message is not None else None,
        "content": pipe.state.accumulated_text,
        "malformed_lines": pipe.diagnostics.malformed_count,
    }


def handle_stream(args: argparse.Namespace) -> int:
    """Execute the ``stream`` subcommand."""
    if not args.message:
        print(json.dumps({"error": "--message is required"}), file=sys.stderr)
        return 2
    try:
        plan = _plan_from_args(args)
    except UsageError as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 2

    logger = get_logger("academio_pipe.cli")
    ctx = LogContext(target=plan["target"], session_id=plan.get("session_id"), surface=plan["surface"])
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1, emitted=None)
    try:
        summary = asyncio.run(run_stream(plan, live=not args.json))
    except PipeError as e:
        normalized_log_event(
            logger, "cli.error", ctx, phase="finalize", error_code=e.code.value, emitted=False, error=e.message
        )
        print(json.dumps({"error": e.message, "code": e.code.value}), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        normalized_log_event(logger, "cli.cancelled", ctx, phase="finalize", emitted=None)
        return 130

    normalized_log_event(
        logger,
        "cli.finalize",
        ctx,
        phase="finalize",
        emitted=bool(summary["content"]),
        error=summary["error"],
    )
    if args.json:
        print(json.dumps(summary))
    if not summary["ok"]:
        if not args.json:
            print(json.dumps({"error": summary["error"]}), file=sys.stderr)
        return 1
    return 0


__all__ = ["UsageError", "plan_request", "run_stream", "handle_plan", "handle_stream"]
