"""Host control exceptions."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from . import ApplicationError


class HostControlError(ApplicationError):
    """Base host control error."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Host control operation failed"
        super().__init__(message, **kwargs)


class HostCommandError(HostControlError):
    """A batched stop/start command exited unsuccessfully."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        rendered = " ".join(command)
        message = f"Command failed ({returncode}): {rendered}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message, command=list(command), returncode=returncode, stderr=stderr)


class UnsupportedPlatformError(HostControlError):
    """The host backend requires a platform facility that is not available."""

    def __init__(self, facility: str) -> None:
        super().__init__(f"{facility} is only available on Windows hosts", facility=facility)
