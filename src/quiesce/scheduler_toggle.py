"""Toggle the scheduled-task runner through its persisted start flag.

The flag and the live runner diverge until the host restarts, so a toggle
never promises same-session completion. Whenever the flag is written, or the
runner has not yet caught up with it, the result is PENDING_RESTART.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import HostControlError
from .host_control import HostControl
from .models import SchedulerFlag, SchedulerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    state: SchedulerState
    message: str
    flag: Optional[SchedulerFlag] = None

    @property
    def requires_restart(self) -> bool:
        return self.state.requires_restart


class SchedulerToggle:
    def __init__(self, host: HostControl) -> None:
        self._host = host

    def current_flag(self) -> Optional[SchedulerFlag]:
        try:
            raw = self._host.read_scheduler_flag()
        except HostControlError as exc:
            logger.warning("Scheduler flag read failed: %s", exc)
            return None
        flag = SchedulerFlag.parse(raw)
        if flag is None:
            logger.warning("Scheduler flag holds unexpected value %r", raw)
        return flag

    def disable(self) -> ToggleResult:
        return self._transition(SchedulerFlag.DISABLED, runner_should_run=False, verb="shut down")

    def enable(self) -> ToggleResult:
        return self._transition(SchedulerFlag.ENABLED_DELAYED, runner_should_run=True, verb="start")

    def _transition(self, target: SchedulerFlag, *, runner_should_run: bool, verb: str) -> ToggleResult:
        flag = self.current_flag()
        if flag is None:
            return self._report(SchedulerState.UNDEFINED, "Task scheduler flag is in an undefined state; no change made")

        if flag is not target:
            try:
                self._host.write_scheduler_flag(target.value)
            except HostControlError as exc:
                logger.error("Scheduler flag write failed: %s", exc)
                return self._report(SchedulerState.UNDEFINED, "Task scheduler flag could not be updated", flag)
            return self._report(SchedulerState.PENDING_RESTART, "Task scheduler updated, restart required", target)

        runner_active = self._host.scheduler_runner_active().is_present
        if runner_active != runner_should_run:
            return self._report(
                SchedulerState.PENDING_RESTART,
                f"Task scheduler set to {verb}, restart required",
                flag,
            )

        logger.debug("Task scheduler already %s", "running" if runner_active else "stopped")
        return ToggleResult(SchedulerState.READY, "", flag)

    @staticmethod
    def _report(state: SchedulerState, message: str, flag: Optional[SchedulerFlag] = None) -> ToggleResult:
        logger.warning(message)
        return ToggleResult(state, message, flag)


__all__ = ["SchedulerToggle", "ToggleResult"]
