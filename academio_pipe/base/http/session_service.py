"""HTTP implementation of the ``SessionService`` protocol.

Reads a session snapshot (session record, prior messages and the surface's
extra payload keys) with a plain, non-streaming GET.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..errors import ErrorCode, PipeError, classify_exception, connection_failed
from ..logging import LogContext, log_event
from ..models import SessionSnapshot
from ..timeouts import TimeoutConfig, get_timeout_config


class HttpSessionService:
    """Fetch session snapshots through an ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout_config: Optional[TimeoutConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client
        self._timeouts = timeout_config
        self._logger = logger or logging.getLogger("academio_pipe.http.session")

    async def fetch_snapshot(self, path: str) -> SessionSnapshot:
        """GET ``path`` and decode it; failures raise ``PipeError``."""
        timeouts = self._timeouts or get_timeout_config()
        try:
            response = await self._client.get(path, timeout=timeouts.http_timeout())
        except httpx.HTTPError as exc:
            raise PipeError(
                code=classify_exception(exc),
                message=str(exc) or exc.__class__.__name__,
                target=path,
                raw=exc,
            ) from exc
        if response.status_code != 200:
            raise connection_failed(response, path)
        try:
            data = response.json()
        except ValueError as exc:
            raise PipeError(
                code=ErrorCode.VALIDATION,
                message="Session snapshot is not valid JSON",
                target=path,
                status=response.status_code,
                raw=exc,
            ) from exc
        if not isinstance(data, dict):
            raise PipeError(
                code=ErrorCode.VALIDATION,
                message="Session snapshot must be a JSON object",
                target=path,
                status=response.status_code,
            )
        snapshot = SessionSnapshot.from_dict(data)
        log_event(
            self._logger,
            "session.loaded",
            LogContext(target=path, session_id=snapshot.session_id or None),
            level=logging.DEBUG,
            messages=len(snapshot.messages),
        )
        return snapshot


__all__ = ["HttpSessionService"]
