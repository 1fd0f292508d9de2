"""Base class of every chat surface built on ``AIPipe``.

A surface is the observer of its own pipe: it receives the lifecycle callbacks
of each stream, shapes the outcome for its call site and reports completed
replies through ``on_message_complete``. Sends are gated on readiness: a
surface that is already streaming, or lacks the id it needs, returns ``False``
instead of issuing a request.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import httpx

from ..logging import LogContext, get_logger, log_event
from ..pipe import AIPipe
from ..streaming import BaseStreamObserver
from ..timeouts import TimeoutConfig


class ChatSurface(BaseStreamObserver):
    """Shared plumbing: pipe ownership, readiness gate and state passthrough."""

    surface_name = "chat"
    stream_path = ""

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_message_complete: Optional[Callable[[Any], None]] = None,
        clear_response_on_done: bool = False,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        self.on_message_complete = on_message_complete
        self._logger = get_logger(f"academio_pipe.surface.{self.surface_name}")
        self._pipe = AIPipe(
            client=client,
            base_url=base_url,
            auth_token=auth_token,
            transport=transport,
            observer=self,
            clear_response_on_done=clear_response_on_done,
            timeout_config=timeout_config,
            surface=self.surface_name,
        )

    # State passthrough ---------------------------------------------------
    @property
    def pipe(self) -> AIPipe:
        return self._pipe

    @property
    def is_streaming(self) -> bool:
        return self._pipe.is_streaming

    @property
    def current_response(self) -> str:
        return self._pipe.current_response

    @property
    def error(self) -> Optional[str]:
        return self._pipe.error

    def cancel_stream(self) -> bool:
        return self._pipe.cancel()

    async def aclose(self) -> None:
        await self._pipe.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Helpers for subclasses ----------------------------------------------
    def _ready(self, required_id: Optional[str]) -> bool:
        if not required_id:
            log_event(self._logger, "surface.skipped", LogContext(surface=self.surface_name), level=logging.DEBUG, reason="missing_id")
            return False
        if self._pipe.is_streaming:
            log_event(self._logger, "surface.skipped", LogContext(surface=self.surface_name), level=logging.DEBUG, reason="busy")
            return False
        return True

    async def _stream(self, params: Mapping[str, Any], *, session_id: Optional[str] = None) -> bool:
        await self._pipe.send(self.stream_path, params, session_id=session_id)
        return True

    def _complete(self, message: Any) -> None:
        if self.on_message_complete is not None:
            self.on_message_complete(message)


__all__ = ["ChatSurface"]
