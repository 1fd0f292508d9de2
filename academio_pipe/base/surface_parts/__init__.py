"""Single-class surface bases re-exported by ``base.surfaces``."""

from .chat_surface import ChatSurface
from .history_surface import HistoryChatSurface

__all__ = ["ChatSurface", "HistoryChatSurface"]
