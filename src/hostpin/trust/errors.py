"""
Exceptions raised by the host verification subsystem.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class HostVerificationError(Exception):
    """Base exception for host verification operations."""
    pass


class UsageError(HostVerificationError, ValueError):
    """Raised when the caller supplies an invalid hostname or port."""
    pass


class PathError(HostVerificationError):
    """Raised when the default store path cannot be constructed."""
    pass


class StoreIOError(HostVerificationError):
    """Raised when the known-hosts store cannot be read or rewritten.

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        path: Union[str, Path, None] = None,
        cause: Optional[OSError] = None,
    ):
        self.path = Path(path) if path is not None else None
        self.errno = cause.errno if cause is not None else None
        if cause is not None and cause.strerror:
            message = f"{message}: {cause.strerror}"
        super().__init__(message)
