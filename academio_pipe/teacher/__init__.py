"""
Teacher assistant chat surface package.

Exports:
- TeacherChatClient: assistant chat across teacher sessions
- MaterialType: material kinds the assistant can draft
"""

from .client import TeacherChatClient
from .material_type import MaterialType

__all__ = ["TeacherChatClient", "MaterialType"]
