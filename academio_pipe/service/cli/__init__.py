"""academio-pipe CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no streaming logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
- ``plan_request``: Dry-run planner used by tests
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from ...base.logging import LOG_LEVEL_ENV, configure_logger
from .cli_actions import handle_plan, handle_stream, plan_request
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    p = build_parser()
    argv_list = list(sys.argv[1:] if argv is None else argv)
    # Inject the default subcommand "stream" when omitted.
    if not argv_list or argv_list[0] not in {"stream", "plan"}:
        argv_list = ["stream"] + argv_list
    args = p.parse_args(argv_list)

    if args.log_level or args.log_file:
        configure_logger(level=args.log_level or os.getenv(LOG_LEVEL_ENV), file_path=args.log_file)
    return handle_plan(args) if args.cmd == "plan" else handle_stream(args)


__all__ = ["main", "plan_request"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
