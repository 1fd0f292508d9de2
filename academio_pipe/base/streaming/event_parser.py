"""Event parser: complete lines to typed ``WireEvent`` records.

Only lines starting with the data prefix carry payloads; blank separators and
any other SSE field lines are skipped. A payload that fails to decode is
recorded and skipped so one bad line never aborts the stream.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from pydantic import ValidationError

from ..dto.wire_payload import WirePayloadDTO
from ..logging import LogContext, normalized_log_event
from ..errors import ErrorCode
from ...config.defaults import DEFAULT_DATA_PREFIX
from .stream_diagnostics import StreamDiagnostics
from .wire_event import WireEvent, WireEventType

MalformedHook = Callable[[str, Exception], None]


class EventParser:
    """Decode payload lines into ``WireEvent`` instances."""

    def __init__(
        self,
        *,
        prefix: str = DEFAULT_DATA_PREFIX,
        diagnostics: Optional[StreamDiagnostics] = None,
        on_malformed: Optional[MalformedHook] = None,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._prefix = prefix
        self.diagnostics = diagnostics if diagnostics is not None else StreamDiagnostics()
        self._on_malformed = on_malformed
        self._logger = logger or logging.getLogger("academio_pipe.streaming.parser")
        self._ctx = ctx

    def parse(self, line: str) -> Optional[WireEvent]:
        """Return the event carried by ``line`` or ``None`` when there is none."""
        if not line.startswith(self._prefix):
            return None
        data = line[len(self._prefix):].strip()
        if not data:
            return None
        try:
            payload = WirePayloadDTO.model_validate_json(data)
        except ValidationError as exc:
            self._malformed(line, exc)
            return None
        try:
            kind = WireEventType(payload.type)
        except ValueError:
            self.diagnostics.record_unrecognized()
            self._logger.debug("ignoring wire event with unrecognized type %r", payload.type)
            return None
        return WireEvent(
            type=kind,
            content=payload.content,
            error=payload.error,
            session_id=payload.session_id,
            user_message_id=payload.user_message_id,
            assistant_message_id=payload.assistant_message_id,
        )

    def _malformed(self, line: str, exc: Exception) -> None:
        self.diagnostics.record_malformed(line)
        normalized_log_event(
            self._logger,
            "stream.malformed",
            self._ctx,
            phase="mid_stream",
            error_code=ErrorCode.MALFORMED_EVENT.value,
            level=logging.WARNING,
            line_len=len(line),
            malformed_count=self.diagnostics.malformed_count,
            reason=str(exc).splitlines()[0] if str(exc) else exc.__class__.__name__,
        )
        if self._on_malformed is not None:
            self._on_malformed(line, exc)


__all__ = ["EventParser", "MalformedHook"]
