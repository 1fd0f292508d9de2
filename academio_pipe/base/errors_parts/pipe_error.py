"""
Structured pipe error exception type.

Wraps transport, protocol and caller errors with a normalized `ErrorCode` so the
accumulator, the façade and logging can treat them uniformly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class PipeError(Exception):
    """Represents a structured pipe error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message; this is what surfaces in the
            user-visible ``error`` field for terminal failures.
        target: Endpoint the failing stream was issued against, if any.
        status: HTTP status code when the failure came from a response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    target: Optional[str] = None
    status: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.target or '-'} {self.code.value}: {self.message}"

    @property
    def is_cancellation(self) -> bool:
        """Whether this error records a caller-initiated abort."""
        return self.code is ErrorCode.CANCELLED


__all__ = ["PipeError"]
