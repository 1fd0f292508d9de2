"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `academio_pipe.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .pipe_error import PipeError
from .classification import classify_exception, connection_failed

__all__ = ["ErrorCode", "PipeError", "classify_exception", "connection_failed"]
