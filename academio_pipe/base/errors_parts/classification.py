"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, httpx exception
families, and message heuristics as a fallback.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .pipe_error import PipeError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.CONNECTION_FAILED,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    500: ErrorCode.CONNECTION_FAILED,
    502: ErrorCode.CONNECTION_FAILED,
    503: ErrorCode.CONNECTION_FAILED,
    504: ErrorCode.TIMEOUT,
}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without structure."""
    PATTERN_GROUPS = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("unauthorized", "forbidden", "token expired")),
        (ErrorCode.CONNECTION_FAILED, ("connection", "refused", "unreachable")),
        (ErrorCode.MALFORMED_EVENT, ("malformed", "json")),
        (ErrorCode.VALIDATION, ("validation", "invalid")),
    )
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. PipeError passthrough.
        2. Timeout exceptions (builtin, asyncio, httpx).
        3. httpx transport failures.
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, PipeError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.CONNECTION_FAILED
    status = _extract_status(exc)
    if status is not None:
        if status in _HTTP_STATUS_MAP:
            return _HTTP_STATUS_MAP[status]
        if status >= 400:
            return ErrorCode.CONNECTION_FAILED
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def connection_failed(response: httpx.Response, target: Optional[str] = None) -> PipeError:
    """Build the ``CONNECTION_FAILED`` error for a non-success response.

    The message mirrors what the user sees, e.g. ``"HTTP 500: Internal Server Error"``.
    """
    reason = response.reason_phrase
    message = f"HTTP {response.status_code}: {reason}" if reason else f"HTTP {response.status_code}"
    return PipeError(
        code=ErrorCode.CONNECTION_FAILED,
        message=message,
        target=target,
        status=response.status_code,
    )


__all__ = [
    "classify_exception",
    "connection_failed",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
