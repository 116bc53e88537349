"""Data models shared by the quiescing components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar, Union

T = TypeVar("T")


class ProbeResult(Enum):
    """Outcome of a single existence/state query against the host."""

    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"  # query errored; treated as absent

    @property
    def is_present(self) -> bool:
        return self is ProbeResult.PRESENT

    @classmethod
    def from_bool(cls, value: bool) -> "ProbeResult":
        return cls.PRESENT if value else cls.ABSENT


class SchedulerFlag(Enum):
    """Persisted start mode of the scheduled-task runner."""

    ENABLED_DELAYED = 2
    DISABLED = 4

    @classmethod
    def parse(cls, raw: Optional[int]) -> Optional["SchedulerFlag"]:
        """Return the matching flag, or None for values outside the two known constants."""
        for member in cls:
            if member.value == raw:
                return member
        return None


class SchedulerState(Enum):
    """Result of a scheduler toggle attempt."""

    READY = ("ready", False)
    PENDING_RESTART = ("pending_restart", True)
    UNDEFINED = ("undefined", False)

    def __init__(self, label: str, requires_restart: bool) -> None:
        self.label = label
        self.requires_restart = requires_restart


class CancelReason(Enum):
    TOO_SOON_AFTER_LOGON = "too_soon_after_logon"
    NOT_ELEVATED = "not_elevated"
    PENDING_RESTART = "pending_restart"
    UNDEFINED_SCHEDULER_STATE = "undefined_scheduler_state"
    SNAPSHOT_CONSUMED = "snapshot_consumed"


@dataclass(frozen=True)
class ServiceRecord:
    name: str
    existed: bool
    was_running: bool


@dataclass(frozen=True)
class ProcessRecord:
    name: str
    existed: bool
    was_suspended: bool
    executable_path: Optional[str] = None


@dataclass
class Snapshot:
    """Pre-shutdown record of what was running.

    A snapshot is a single-use token: ``Quiescer.enable`` consumes it and
    refuses it on any later call.
    """

    services: Tuple[ServiceRecord, ...]
    processes: Tuple[ProcessRecord, ...]
    consumed: bool = field(default=False, compare=False)

    def consume(self) -> None:
        self.consumed = True

    @property
    def running_services(self) -> Tuple[str, ...]:
        return tuple(record.name for record in self.services if record.was_running)

    @property
    def stopped_processes(self) -> Tuple[str, ...]:
        return tuple(record.name for record in self.processes if record.existed and not record.was_suspended)


@dataclass(frozen=True)
class Completed(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Cancelled:
    reason: CancelReason
    message: str

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Completed[T], Cancelled]


__all__ = [
    "CancelReason",
    "Cancelled",
    "Completed",
    "Outcome",
    "ProbeResult",
    "ProcessRecord",
    "SchedulerFlag",
    "SchedulerState",
    "ServiceRecord",
    "Snapshot",
]
