"""Bearer-token authentication for the pipe's HTTP client.

``BearerTokenAuth`` plugs into ``httpx`` as an auth flow: it attaches
``Authorization: Bearer <token>`` to every request that does not already carry
one and, when the server answers ``401``, notifies ``AuthEvents`` listeners
with a ``logout`` event so the application can drop its session. The token is
read per request, from a fixed value or a getter, so a refreshed token is
picked up without rebuilding the client.
"""
from __future__ import annotations

import logging
from typing import Callable, Generator, List, Optional

import httpx

from ..logging import LogContext, log_event

AuthListener = Callable[[str], None]
TokenGetter = Callable[[], Optional[str]]

LOGOUT = "logout"


class AuthEvents:
    """Minimal publish/subscribe channel for authentication events."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._listeners: List[AuthListener] = []
        self._logger = logger or logging.getLogger("academio_pipe.http.auth")

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, event: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001 - one listener must not starve the rest
                self._logger.exception("auth listener failed for event %r", event)


class BearerTokenAuth(httpx.Auth):
    """Inject the bearer token and report ``401`` responses."""

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        token_getter: Optional[TokenGetter] = None,
        events: Optional[AuthEvents] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._token = token
        self._token_getter = token_getter
        self.events = events if events is not None else AuthEvents()
        self._logger = logger or logging.getLogger("academio_pipe.http.auth")

    def current_token(self) -> Optional[str]:
        if self._token_getter is not None:
            return self._token_getter()
        return self._token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self.current_token()
        if token and "Authorization" not in request.headers:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code == 401:
            log_event(
                self._logger,
                "auth.unauthorized",
                LogContext(target=request.url.path),
                level=logging.WARNING,
                had_token=bool(token),
            )
            self.events.emit(LOGOUT)


__all__ = ["AuthEvents", "AuthListener", "BearerTokenAuth", "LOGOUT", "TokenGetter"]
