"""Timestamp helper shared by message DTOs."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["utc_timestamp"]
