"""Timeout configuration for the streaming pipe.

The text-event protocol has no idle timeout: a stream ends on ``done``,
``error``, source completion or cancellation. What remains configurable is how
long establishing the connection may take, how long plain (non-streaming) reads
such as session snapshots may take, and an optional hard ceiling on a whole
stream.

Supported environment variables (all optional, positive floats):
    ACADEMIO_TIMEOUT_CONNECT_SECONDS
    ACADEMIO_TIMEOUT_HTTP_SECONDS
    ACADEMIO_STREAM_CEILING_SECONDS

The parsed configuration is cached per process and refreshed when any of the
variables above changes value.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx

_ENV_NAMES = (
    "ACADEMIO_TIMEOUT_CONNECT_SECONDS",
    "ACADEMIO_TIMEOUT_HTTP_SECONDS",
    "ACADEMIO_STREAM_CEILING_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Bound on establishing the TCP/TLS connection.
        http_timeout_seconds: Bound on non-streaming requests.
        stream_ceiling_seconds: Optional absolute cap on one stream; ``None``
            means the stream may run until it settles or is cancelled.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 30.0
    stream_ceiling_seconds: float | None = None

    def stream_timeout(self) -> httpx.Timeout:
        """httpx timeout for streaming requests: bounded connect, unbounded reads."""
        return httpx.Timeout(None, connect=self.connect_timeout_seconds)

    def http_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.http_timeout_seconds),
        stream_ceiling_seconds=_parse_env_float(_ENV_NAMES[2], None),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
