"""academio_pipe package

Client-side streaming pipe for the Academio tutoring chat.

Purpose:
    Open a token-streaming request, decode the text-event wire format as it
    arrives, assemble the assistant reply and report it through lifecycle
    callbacks, with single-flight cancellation (packaging is configured via
    the repository root ``pyproject.toml``).

Public API (re-exported):
    - Version: ``__version__``
    - Façade: :class:`AIPipe`
    - Exceptions: :class:`PipeError`, :class:`ErrorCode`
    - Models: :class:`AssembledMessage`, :class:`ChatMessage`
    - Surfaces: ``ChatClient``, ``HomeworkChatClient``, ``LessonChatClient``,
      ``TeacherChatClient``
"""

from .base.errors import ErrorCode, PipeError
from .base.models import AssembledMessage, ChatMessage
from .base.pipe import AIPipe
from .chat import ChatClient
from .homework import HomeworkChatClient
from .lesson import LessonChatClient
from .teacher import MaterialType, TeacherChatClient

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AIPipe",
    "PipeError",
    "ErrorCode",
    "AssembledMessage",
    "ChatMessage",
    "ChatClient",
    "HomeworkChatClient",
    "LessonChatClient",
    "TeacherChatClient",
    "MaterialType",
]
