"""SessionService Protocol (single-class module).

Boundary of the persistence collaborator: returns a session's prior messages
and metadata. Read once when a surface mounts; not part of the streaming core.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import SessionSnapshot


@runtime_checkable
class SessionService(Protocol):
    async def fetch_snapshot(self, path: str) -> SessionSnapshot:  # pragma: no cover - interface
        """Return the snapshot stored at ``path``; raise ``PipeError`` on failure."""
        ...
