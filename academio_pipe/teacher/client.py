"""Teacher assistant chat surface.

Unlike the student surfaces the session is chosen per call, since a teacher
switches between assistant sessions in one view.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from ..base.errors import ErrorCode, PipeError
from ..base.models import AssembledMessage
from ..base.surfaces import ChatSurface
from ..config.defaults import TEACHER_CHAT_STREAM_PATH
from .material_type import MaterialType


def _coerce_material_type(value: Union[MaterialType, str, None]) -> Optional[MaterialType]:
    if value is None or value == "":
        return None
    try:
        return MaterialType(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in MaterialType)
        raise PipeError(
            ErrorCode.VALIDATION,
            f"Unknown material type {value!r}; expected one of: {allowed}",
            target=TEACHER_CHAT_STREAM_PATH,
            raw=exc,
        ) from exc


class TeacherChatClient(ChatSurface):
    surface_name = "teacher"
    stream_path = TEACHER_CHAT_STREAM_PATH

    def __init__(
        self,
        *,
        on_message_complete: Optional[Callable[[AssembledMessage], None]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(on_message_complete=on_message_complete, **kwargs)
        self.session_id = ""

    async def send_message(
        self,
        session_id: str,
        message: str,
        material_type: Union[MaterialType, str, None] = None,
    ) -> bool:
        """Stream a reply within ``session_id``.

        Raises:
            PipeError: ``VALIDATION`` for an unknown ``material_type``.
        """
        kind = _coerce_material_type(material_type)
        if not self._ready(session_id):
            return False
        self.session_id = session_id
        params = {
            "sessionId": session_id,
            "message": message,
            "materialType": kind.value if kind is not None else None,
        }
        return await self._stream(params, session_id=session_id)

    def on_message(self, message: AssembledMessage) -> None:
        self._complete(message)


__all__ = ["TeacherChatClient"]
