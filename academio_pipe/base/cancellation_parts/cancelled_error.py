"""Cancellation error type.

Defines the public ``CancelledError`` raised by the read loop when it observes
a cancellation request. It is distinct from ``asyncio.CancelledError`` so the
pipe can tell "the caller aborted this stream" apart from "the task itself was
torn down".
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a stream is cancelled cooperatively.

    This specialized error distinguishes cooperative cancellation from other
    runtime failures so it is never surfaced as a user-visible error.
    """

__all__ = ["CancelledError"]
