"""CLI parser construction for academio-pipe.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...teacher import MaterialType

SURFACES = ("chat", "homework", "lesson", "teacher")


def _add_request_flags(parser: argparse.ArgumentParser) -> None:
    """Flags describing the request; shared by ``stream`` and ``plan``."""
    parser.add_argument("--surface", choices=SURFACES, default="chat")
    parser.add_argument("--session-id", default=None, help="Chat session (chat, teacher)")
    parser.add_argument(
        "--item-id",
        default=None,
        help="Personalized homework or lesson id (homework, lesson)",
    )
    parser.add_argument("--message", default=None)
    parser.add_argument("--attachment", default=None, help="Extracted attachment text (chat)")
    parser.add_argument("--student-id", default=None, help="Student on whose behalf to chat (chat)")
    parser.add_argument("--question-context", default=None, help="Question being discussed (homework)")
    parser.add_argument(
        "--material-type",
        choices=[m.value for m in MaterialType],
        default=None,
        help="Material kind to draft (teacher)",
    )
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-file", default=None, help="Also write JSON logs to this file")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    No I/O or network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="academio-pipe", description="Stream chat replies from an Academio server"
    )
    sub = p.add_subparsers(dest="cmd")

    p_stream = sub.add_parser("stream", help="Send a message and print the streamed reply (default)")
    _add_request_flags(p_stream)

    p_plan = sub.add_parser("plan", help="Print the request that would be issued, without I/O")
    _add_request_flags(p_plan)

    return p


__all__ = ["build_parser", "SURFACES"]
