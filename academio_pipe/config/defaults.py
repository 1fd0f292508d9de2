"""Centralized defaults for the streaming pipe.

Endpoint paths follow the chat server's routes; the data prefix is the fixed
marker of payload lines in the text-event protocol.
"""

from __future__ import annotations

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_DATA_PREFIX = "data: "

CHAT_STREAM_PATH = "/api/chat/stream"
HOMEWORK_CHAT_STREAM_PATH = "/api/student/homework-chat/stream"
HOMEWORK_CHAT_SESSION_PATH = "/api/student/homework-chat/{homework_id}"
LESSON_CHAT_STREAM_PATH = "/api/student/lesson-chat/stream"
LESSON_CHAT_SESSION_PATH = "/api/student/lesson-chat/{lesson_id}"
TEACHER_CHAT_STREAM_PATH = "/api/teacher/chat/stream"

# Upper bound on malformed lines kept verbatim per stream for diagnostics.
MALFORMED_SAMPLE_LIMIT = 5

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_DATA_PREFIX",
    "CHAT_STREAM_PATH",
    "HOMEWORK_CHAT_STREAM_PATH",
    "HOMEWORK_CHAT_SESSION_PATH",
    "LESSON_CHAT_STREAM_PATH",
    "LESSON_CHAT_SESSION_PATH",
    "TEACHER_CHAT_STREAM_PATH",
    "MALFORMED_SAMPLE_LIMIT",
]
