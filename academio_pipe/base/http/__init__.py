"""HTTP collaborators of the pipe: client factory, auth, session snapshots."""

from .auth import AuthEvents, BearerTokenAuth, LOGOUT
from .client import build_async_client
from .session_service import HttpSessionService

__all__ = [
    "AuthEvents",
    "BearerTokenAuth",
    "LOGOUT",
    "build_async_client",
    "HttpSessionService",
]
