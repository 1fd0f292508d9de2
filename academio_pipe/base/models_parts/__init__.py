"""Message and snapshot DTOs (one class per module)."""

from .assembled_message import AssembledMessage
from .chat_message import ChatMessage, Role
from .session_snapshot import SessionSnapshot
from .timestamps import utc_timestamp

__all__ = ["AssembledMessage", "ChatMessage", "Role", "SessionSnapshot", "utc_timestamp"]
