"""Lesson chat surface: one chat per personalized lesson."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models import SessionSnapshot
from ..base.surfaces import HistoryChatSurface
from ..config.defaults import LESSON_CHAT_SESSION_PATH, LESSON_CHAT_STREAM_PATH


class LessonChatClient(HistoryChatSurface):
    surface_name = "lesson"
    stream_path = LESSON_CHAT_STREAM_PATH
    id_param = "lessonId"

    def __init__(self, personalized_lesson_id: str, **kwargs: Any) -> None:
        super().__init__(personalized_lesson_id, **kwargs)
        self.lesson: Optional[Dict[str, Any]] = None

    @property
    def personalized_lesson_id(self) -> str:
        return self.item_id

    async def send_message(self, message: str) -> bool:
        return await self._send(message)

    def _session_target(self) -> str:
        return LESSON_CHAT_SESSION_PATH.format(lesson_id=self.item_id)

    def _apply_snapshot(self, snapshot: SessionSnapshot) -> None:
        lesson = snapshot.payload.get("lesson")
        self.lesson = lesson if isinstance(lesson, dict) else None


__all__ = ["LessonChatClient"]
