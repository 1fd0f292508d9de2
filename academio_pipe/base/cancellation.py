"""Cooperative cancellation primitives (public API facade).

Notes
-----
- ``CancellationToken`` records the intent to cancel a stream and runs the
  callbacks that close its transport.
- ``CancelledError`` is raised by the read loop when it observes the request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
