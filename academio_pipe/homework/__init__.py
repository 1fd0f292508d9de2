"""Homework sidekick chat surface package."""

from .client import HomeworkChatClient

__all__ = ["HomeworkChatClient"]
