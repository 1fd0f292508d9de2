"""
Interfaces (Protocols) of the pipe's collaborators.

Re-exports the single-class modules under ``interfaces_parts`` so imports stay
stable for surfaces and tests.
"""

from __future__ import annotations

from .interfaces_parts import SessionService, StreamObserver

__all__ = ["SessionService", "StreamObserver"]
