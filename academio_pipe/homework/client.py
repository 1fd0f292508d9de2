"""Homework sidekick chat surface.

One chat per personalized homework. ``reload()`` reads the session snapshot
(``session``, ``messages``, ``homework`` with its ``questions``); each message
may carry the question it is about as ``questionContext``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.models import SessionSnapshot
from ..base.surfaces import HistoryChatSurface
from ..config.defaults import HOMEWORK_CHAT_SESSION_PATH, HOMEWORK_CHAT_STREAM_PATH


class HomeworkChatClient(HistoryChatSurface):
    surface_name = "homework"
    stream_path = HOMEWORK_CHAT_STREAM_PATH
    id_param = "homeworkId"

    def __init__(self, personalized_homework_id: str, **kwargs: Any) -> None:
        super().__init__(personalized_homework_id, **kwargs)
        self.homework: Optional[Dict[str, Any]] = None
        self.questions: List[Dict[str, Any]] = []

    @property
    def personalized_homework_id(self) -> str:
        return self.item_id

    async def send_message(self, message: str, question_context: Optional[str] = None) -> bool:
        """Stream a reply; ``False`` when busy or without a homework id."""
        return await self._send(message, question_context, questionContext=question_context)

    def _session_target(self) -> str:
        return HOMEWORK_CHAT_SESSION_PATH.format(homework_id=self.item_id)

    def _apply_snapshot(self, snapshot: SessionSnapshot) -> None:
        homework = snapshot.payload.get("homework")
        self.homework = homework if isinstance(homework, dict) else None
        self.questions = list((self.homework or {}).get("questions") or [])


__all__ = ["HomeworkChatClient"]
