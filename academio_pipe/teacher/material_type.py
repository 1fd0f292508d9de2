"""Kinds of material the teacher assistant can be asked to draft."""

from __future__ import annotations

from enum import Enum


class MaterialType(str, Enum):
    LESSON = "lesson"
    PRESENTATION = "presentation"
    TEST = "test"
    HOMEWORK = "homework"
    GENERAL = "general"


__all__ = ["MaterialType"]
