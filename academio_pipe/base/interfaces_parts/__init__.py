"""Single-class Protocol modules re-exported by ``base.interfaces``."""

from .session_service import SessionService
from .stream_observer import StreamObserver

__all__ = ["SessionService", "StreamObserver"]
