"""Lesson chat surface package."""

from .client import LessonChatClient

__all__ = ["LessonChatClient"]
