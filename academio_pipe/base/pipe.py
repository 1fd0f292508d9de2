"""AIPipe: the single entry point of the streaming pipe.

Callers construct one pipe per consumer (a chat surface, a CLI run), register
lifecycle callbacks, and ``await pipe.send(target, inputs)``. The pipe mirrors
the running stream into plain attributes for the consumer to render:

* ``is_streaming`` - ``True`` from send until the stream is finished.
* ``current_response`` - the accumulated reply text so far.
* ``error`` - user-visible message of the last terminal failure, or ``None``.
* ``last_message`` - the ``AssembledMessage`` of the last completed stream.

Example::

    async with AIPipe(on_delta=lambda text, delta: print(delta, end="")) as pipe:
        message = await pipe.send("/api/chat/stream", {"sessionId": sid, "message": "hi"})
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

import httpx
from pydantic import ValidationError

from ..config import get_pipe_config
from .dto import StreamRequestDTO
from .errors import ErrorCode, PipeError
from .http import build_async_client
from .logging import LogContext, get_logger, log_event
from .models import AssembledMessage
from .streaming import (
    BaseStreamObserver,
    CallbackObserver,
    FanOutObserver,
    MalformedHook,
    ResponseAccumulator,
    StreamDiagnostics,
    StreamSessionController,
    StreamState,
    WireEvent,
)
from .timeouts import TimeoutConfig


class _PipeMirror(BaseStreamObserver):
    """Copy stream progress onto the pipe's public attributes."""

    def __init__(self, pipe: "AIPipe") -> None:
        self._pipe = pipe

    def on_delta(self, text: str, delta: str) -> None:
        self._pipe.current_response = text

    def on_message(self, message: AssembledMessage) -> None:
        self._pipe.last_message = message

    def on_error(self, message: str) -> None:
        self._pipe.error = message


class AIPipe:
    """Single-flight streaming pipe with observable state."""

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_start: Optional[Callable[[WireEvent], None]] = None,
        on_delta: Optional[Callable[[str, str], None]] = None,
        on_done: Optional[Callable[[WireEvent, str], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_message: Optional[Callable[[AssembledMessage], None]] = None,
        on_malformed: Optional[MalformedHook] = None,
        observer: Optional[Any] = None,
        clear_response_on_done: bool = False,
        timeout_config: Optional[TimeoutConfig] = None,
        logger: Optional[logging.Logger] = None,
        surface: Optional[str] = None,
    ) -> None:
        cfg = get_pipe_config({"base_url": base_url, "auth_token": auth_token})
        self._owns_client = client is None
        self._client = client if client is not None else build_async_client(
            base_url,
            auth_token=auth_token,
            transport=transport,
            timeout_config=timeout_config,
        )
        self._logger = logger or get_logger("academio_pipe.pipe")
        self._surface = surface
        observers: List[Any] = [
            _PipeMirror(self),
            CallbackObserver(
                on_start=on_start,
                on_delta=on_delta,
                on_done=on_done,
                on_message=on_message,
                on_error=on_error,
            ),
        ]
        if observer is not None:
            observers.append(observer)
        self._observer = FanOutObserver(observers)
        self._clear_response_on_done = clear_response_on_done
        self._controller = StreamSessionController(
            self._client,
            prefix=cfg["data_prefix"],
            timeout_config=timeout_config,
            on_malformed=on_malformed,
            logger=get_logger("academio_pipe.streaming"),
            surface=surface,
        )
        self._generation = 0
        self._closed = False

        self.is_streaming = False
        self.current_response = ""
        self.error: Optional[str] = None
        self.last_message: Optional[AssembledMessage] = None
        self.state = StreamState()

    # Introspection -------------------------------------------------------
    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def controller(self) -> StreamSessionController:
        return self._controller

    @property
    def diagnostics(self) -> StreamDiagnostics:
        """Malformed/unrecognized line record of the most recent stream."""
        return self.state.diagnostics

    # API -----------------------------------------------------------------
    async def send(
        self,
        target: str,
        inputs: Optional[Mapping[str, Any]] = None,
        *,
        session_id: Optional[str] = None,
        replace: bool = False,
    ) -> Optional[AssembledMessage]:
        """Stream one reply from ``target`` with ``inputs`` as query parameters.

        Returns the assembled message when the stream reached ``done`` with an
        assistant id, otherwise ``None`` (failures are reported through
        ``error`` and ``on_error``, never raised).

        Raises:
            PipeError: ``BUSY`` while another stream is live and ``replace`` is
                false; ``VALIDATION`` for unusable inputs; ``INTERNAL`` after
                the pipe was closed.
        """
        if self._closed:
            raise PipeError(ErrorCode.INTERNAL, "Pipe is closed", target=target)
        if self.is_streaming and not replace:
            log_event(
                self._logger,
                "pipe.busy",
                LogContext(target=target, session_id=session_id, surface=self._surface),
                level=logging.DEBUG,
            )
            raise PipeError(ErrorCode.BUSY, "A response is already streaming", target=target)
        try:
            request = StreamRequestDTO(target=target, params=inputs or {})
        except ValidationError as exc:
            raise PipeError(
                ErrorCode.VALIDATION,
                f"Invalid stream request: {exc.errors()[0].get('msg', exc)}",
                target=target,
                raw=exc,
            ) from exc

        self._generation += 1
        generation = self._generation
        accumulator = ResponseAccumulator(self._observer, session_id=session_id)
        self.state = accumulator.state
        self.current_response = ""
        self.error = None
        self.is_streaming = True
        try:
            await self._controller.start_stream(request.target, request.params, accumulator)
        finally:
            # A superseding send owns the flags now.
            if generation == self._generation:
                if self._clear_response_on_done:
                    self.current_response = ""
                self.is_streaming = False
        return accumulator.message

    def cancel(self) -> bool:
        """Abort the live stream, if any; never reported as an error."""
        cancelled = self._controller.cancel("cancelled by caller")
        self.is_streaming = False
        return cancelled

    async def aclose(self) -> None:
        """Cancel any live stream and close the client if the pipe created it."""
        if self._closed:
            return
        self._closed = True
        self.cancel()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AIPipe":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["AIPipe"]
