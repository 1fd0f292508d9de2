"""Student chat surface.

Streams replies of the general tutoring chat on ``/api/chat/stream``. The reply
stays visible in ``current_response`` after the stream ends; persisting the
transcript is left to the caller through ``on_message_complete``.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx

from ..base.models import AssembledMessage
from ..base.surfaces import ChatSurface
from ..base.timeouts import TimeoutConfig
from ..config.defaults import CHAT_STREAM_PATH


def compose_message(message: str, attachment_context: Optional[str] = None) -> str:
    """Append extracted attachment text the way the chat server expects it."""
    if not attachment_context:
        return message
    return f"{message}\n\n[Attached content: {attachment_context}]"


class ChatClient(ChatSurface):
    """General student chat bound to one chat session."""

    surface_name = "chat"
    stream_path = CHAT_STREAM_PATH

    def __init__(
        self,
        session_id: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_message_complete: Optional[Callable[[AssembledMessage], None]] = None,
        timeout_config: Optional[TimeoutConfig] = None,
    ) -> None:
        super().__init__(
            client=client,
            base_url=base_url,
            auth_token=auth_token,
            transport=transport,
            on_message_complete=on_message_complete,
            timeout_config=timeout_config,
        )
        self.session_id = session_id

    async def send_message(
        self,
        message: str,
        attachment_context: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> bool:
        """Stream a reply to ``message``; ``False`` if not ready to send."""
        if not self._ready(self.session_id):
            return False
        params = {
            "sessionId": self.session_id,
            "message": compose_message(message, attachment_context),
            "studentId": student_id,
        }
        return await self._stream(params, session_id=self.session_id)

    def on_message(self, message: AssembledMessage) -> None:
        self._complete(message)


__all__ = ["ChatClient", "compose_message"]
