"""Base class of the surfaces that keep a message history.

The homework and lesson chats load a session snapshot (prior messages plus the
item being discussed) and maintain the transcript locally: the user's message
is appended when the server acknowledges it with ``start`` and the assistant's
reply when the stream completes. The running reply is cleared once a stream
ends because the transcript already holds it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import httpx

from ..errors import PipeError
from ..interfaces import SessionService
from ..http import HttpSessionService
from ..logging import LogContext, log_event
from ..models import AssembledMessage, ChatMessage, SessionSnapshot
from ..streaming import WireEvent
from ..timeouts import TimeoutConfig
from .chat_surface import ChatSurface


class HistoryChatSurface(ChatSurface, ABC):
    """Chat surface with a loaded session and a local transcript."""

    id_param = ""

    def __init__(
        self,
        item_id: str,
        *,
        session_service: Optional[SessionService] = None,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_message_complete: Optional[Callable[[ChatMessage], None]] = None,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        super().__init__(
            client=client,
            base_url=base_url,
            auth_token=auth_token,
            transport=transport,
            on_message_complete=on_message_complete,
            clear_response_on_done=True,
            timeout_config=timeout_config,
        )
        self.item_id = item_id
        self._sessions = session_service or HttpSessionService(self._pipe.client, timeout_config=timeout_config)
        self.session: Optional[Dict[str, Any]] = None
        self.messages: List[ChatMessage] = []
        self.is_loading = False
        self._load_error: Optional[str] = None
        self._pending_message = ""
        self._pending_context: Optional[str] = None

    @property
    def session_id(self) -> str:
        return str((self.session or {}).get("id") or "")

    @property
    def error(self) -> Optional[str]:
        """Load failure if any, otherwise the last stream failure."""
        return self._load_error or self._pipe.error

    async def reload(self) -> bool:
        """(Re)load the session snapshot; ``False`` when it could not be read."""
        if not self.item_id:
            return False
        self.is_loading = True
        self._load_error = None
        path = self._session_target()
        try:
            snapshot = await self._sessions.fetch_snapshot(path)
        except PipeError as exc:
            self._load_error = exc.message
            log_event(
                self._logger,
                "surface.load_failed",
                LogContext(target=path, surface=self.surface_name),
                level=logging.WARNING,
                error_code=exc.code.value,
                error=exc.message,
            )
            return False
        finally:
            self.is_loading = False
        self.session = snapshot.session
        self.messages = list(snapshot.messages)
        self._apply_snapshot(snapshot)
        return True

    @abstractmethod
    def _session_target(self) -> str:
        """Path of this surface's session snapshot."""

    def _apply_snapshot(self, snapshot: SessionSnapshot) -> None:
        """Hook for surface-specific payload keys."""

    async def _send(self, message: str, context: Optional[str] = None, **extra: Any) -> bool:
        if not self._ready(self.item_id):
            return False
        self._pending_message = message
        self._pending_context = context
        params: Dict[str, Any] = {self.id_param: self.item_id, "message": message}
        params.update(extra)
        return await self._stream(params, session_id=self.session_id or None)

    # Observer ------------------------------------------------------------
    def on_start(self, event: WireEvent) -> None:
        self.messages.append(
            ChatMessage(
                id=event.user_message_id or "",
                session_id=event.session_id or self.session_id,
                role="user",
                content=self._pending_message,
                question_context=self._pending_context,
            )
        )

    def on_message(self, message: AssembledMessage) -> None:
        entry = ChatMessage.from_assembled(message)
        self.messages.append(entry)
        self._complete(entry)


__all__ = ["HistoryChatSurface"]
