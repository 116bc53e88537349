"""Exception classes for the quiesce package.

All custom exceptions inherit from ApplicationError so callers can catch the
whole family at the CLI boundary.

Exception classes support two patterns:
1. No-argument raise: raise SnapshotError()
2. Contextual attributes: err = HostCommandError(command=["sc"], returncode=5); raise err
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class SnapshotError(ApplicationError):
    """Snapshot is missing, malformed, or already consumed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Snapshot is missing, malformed, or already consumed"
        super().__init__(message, **kwargs)


from .host import HostCommandError, HostControlError, UnsupportedPlatformError  # noqa: E402

__all__ = [
    "ApplicationError",
    "HostCommandError",
    "HostControlError",
    "SnapshotError",
    "UnsupportedPlatformError",
]
