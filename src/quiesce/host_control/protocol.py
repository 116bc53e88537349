"""Capability interface for everything the quiescer asks of the host."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..models import ProbeResult


class HostControl(Protocol):
    """Probes and mutations against a live host.

    Probes never raise: query failures come back as ``ProbeResult.UNKNOWN``
    (or ``None`` for value lookups). Batched mutations raise
    ``HostCommandError`` when the underlying command fails.
    """

    def last_logon_time(self) -> Optional[datetime]: ...

    def is_elevated(self) -> bool: ...

    def service_exists(self, name: str) -> ProbeResult: ...

    def service_running(self, name: str) -> ProbeResult: ...

    def stop_services(self, names: Sequence[str]) -> None: ...

    def start_services(self, names: Sequence[str]) -> None: ...

    def process_exists(self, name: str) -> ProbeResult: ...

    def process_suspended(self, name: str) -> ProbeResult: ...

    def process_executable(self, name: str) -> Optional[str]: ...

    def stop_processes(self, names: Sequence[str]) -> None: ...

    def start_processes(self, paths: Sequence[str]) -> None: ...

    def read_scheduler_flag(self) -> Optional[int]: ...

    def write_scheduler_flag(self, value: int) -> None: ...

    def scheduler_runner_active(self) -> ProbeResult: ...


__all__ = ["HostControl"]
