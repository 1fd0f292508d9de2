"""
Student chat surface package.

Exports:
- ChatClient: general tutoring chat bound to one session
"""

from .client import ChatClient, compose_message

__all__ = ["ChatClient", "compose_message"]
