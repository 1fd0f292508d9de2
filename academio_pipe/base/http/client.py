"""Async HTTP client factory for the pipe.

Purpose:
    Build the ``httpx.AsyncClient`` a pipe or session service talks through,
    with base URL and bearer token resolved from the configuration layer and
    timeouts from :func:`get_timeout_config`.

Lifecycle:
    An ``AsyncClient`` is bound to the event loop it first runs on, so clients
    are not pooled process-wide; whoever calls :func:`build_async_client` owns
    the result and closes it with ``aclose()``.

Testing:
    Pass ``transport=httpx.MockTransport(handler)`` to run every request
    in-process without network I/O.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ...config import get_pipe_config
from ..timeouts import TimeoutConfig, get_timeout_config
from .auth import AuthEvents, BearerTokenAuth


def build_async_client(
    base_url: Optional[str] = None,
    *,
    auth_token: Optional[str] = None,
    auth: Optional[httpx.Auth] = None,
    events: Optional[AuthEvents] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout_config: Optional[TimeoutConfig] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured for the chat server.

    Parameters:
        base_url: Server root; falls back to ``ACADEMIO_BASE_URL`` / defaults.
        auth_token: Bearer token; falls back to ``ACADEMIO_TOKEN``.
        auth: Explicit ``httpx.Auth``; takes precedence over ``auth_token``.
        events: Channel notified of ``logout`` on ``401`` responses. When given
            without a token the client still reports unauthorized responses.
        transport: Optional transport override (tests use ``MockTransport``).
        timeout_config: Override of the process timeout configuration.
    """
    cfg = get_pipe_config({"base_url": base_url, "auth_token": auth_token})
    timeouts = timeout_config or get_timeout_config()
    if auth is None and (cfg.get("auth_token") or events is not None):
        auth = BearerTokenAuth(cfg.get("auth_token"), events=events)
    kwargs = {
        "base_url": cfg["base_url"],
        "timeout": timeouts.http_timeout(),
    }
    if auth is not None:
        kwargs["auth"] = auth
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


__all__ = ["build_async_client"]
