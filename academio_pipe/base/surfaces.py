"""
Base classes of the chat surfaces (public API facade).

``ChatSurface`` owns a pipe and gates sends on readiness; ``HistoryChatSurface``
adds a loaded session and a local transcript.
"""

from .surface_parts import ChatSurface, HistoryChatSurface

__all__ = ["ChatSurface", "HistoryChatSurface"]
