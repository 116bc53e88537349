"""Windows implementation of the host control capability.

psutil answers the read-only questions (sessions, services, processes),
winreg holds the scheduler start flag. Processes are killed through psutil;
service batches and launches go through PowerShell so one privileged call
covers a whole set.
"""

from __future__ import annotations

import getpass
import logging
import os
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

import psutil

from ..exceptions import HostCommandError, HostControlError, UnsupportedPlatformError
from ..models import ProbeResult
from .powershell import (
    PowerShellRunner,
    start_processes_script,
    start_services_script,
    stop_services_script,
)

logger = logging.getLogger(__name__)

SCHEDULER_SERVICE = "Schedule"
SCHEDULER_REGISTRY_KEY = rf"SYSTEM\CurrentControlSet\Services\{SCHEDULER_SERVICE}"
SCHEDULER_REGISTRY_VALUE = "Start"

_RUNNING_SERVICE_STATES = frozenset({"running", "start_pending", "continue_pending"})


def _normalize_process_name(name: str) -> str:
    lowered = name.lower()
    if lowered.endswith(".exe"):
        lowered = lowered[: -len(".exe")]
    return lowered


class WindowsHostControl:
    """HostControl backed by psutil, winreg, ctypes and PowerShell."""

    def __init__(self, runner: Optional[PowerShellRunner] = None, *, user: Optional[str] = None) -> None:
        self._runner = runner or PowerShellRunner()
        self._user = user

    # -- session -----------------------------------------------------------

    def last_logon_time(self) -> Optional[datetime]:
        user = self._user or getpass.getuser()
        try:
            sessions = psutil.users()
        except (psutil.Error, OSError) as exc:
            logger.warning("Unable to enumerate logon sessions: %s", exc)
            return None

        starts = [session.started for session in sessions if _same_user(session.name, user)]
        if not starts:
            logger.debug("No logon session found for %s", user)
            return None
        return datetime.fromtimestamp(max(starts), tz=timezone.utc)

    def is_elevated(self) -> bool:
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError) as exc:
            logger.debug("Administrator check unavailable: %s", exc)
            return False

    # -- services ----------------------------------------------------------

    def _service(self, name: str) -> Any:
        getter = getattr(psutil, "win_service_get", None)
        if getter is None:
            raise UnsupportedPlatformError("psutil.win_service_get")
        return getter(name)

    def service_exists(self, name: str) -> ProbeResult:
        try:
            self._service(name)
        except psutil.NoSuchProcess:
            return ProbeResult.ABSENT
        except (psutil.Error, OSError, HostControlError) as exc:
            logger.debug("Service existence probe failed for %s: %s", name, exc)
            return ProbeResult.UNKNOWN
        return ProbeResult.PRESENT

    def service_running(self, name: str) -> ProbeResult:
        try:
            status = self._service(name).status()
        except psutil.NoSuchProcess:
            return ProbeResult.ABSENT
        except (psutil.Error, OSError, HostControlError) as exc:
            logger.debug("Service status probe failed for %s: %s", name, exc)
            return ProbeResult.UNKNOWN
        return ProbeResult.from_bool(status in _RUNNING_SERVICE_STATES)

    def stop_services(self, names: Sequence[str]) -> None:
        self._runner.run(stop_services_script(names))

    def start_services(self, names: Sequence[str]) -> None:
        self._runner.run(start_services_script(names))

    # -- processes ---------------------------------------------------------

    def _matching_processes(self, name: str) -> List[psutil.Process]:
        wanted = _normalize_process_name(name)
        matches = []
        for proc in psutil.process_iter(["name"]):
            proc_name = proc.info.get("name")
            if proc_name and _normalize_process_name(proc_name) == wanted:
                matches.append(proc)
        return matches

    def process_exists(self, name: str) -> ProbeResult:
        try:
            return ProbeResult.from_bool(bool(self._matching_processes(name)))
        except (psutil.Error, OSError) as exc:
            logger.debug("Process existence probe failed for %s: %s", name, exc)
            return ProbeResult.UNKNOWN

    def process_suspended(self, name: str) -> ProbeResult:
        # psutil reports STATUS_STOPPED on Windows only when every thread is suspended.
        try:
            matches = self._matching_processes(name)
            if not matches:
                return ProbeResult.ABSENT
            return ProbeResult.from_bool(all(proc.status() == psutil.STATUS_STOPPED for proc in matches))
        except (psutil.Error, OSError) as exc:
            logger.debug("Suspension probe failed for %s: %s", name, exc)
            return ProbeResult.UNKNOWN

    def process_executable(self, name: str) -> Optional[str]:
        try:
            for proc in self._matching_processes(name):
                try:
                    path = proc.exe()
                except (psutil.AccessDenied, psutil.NoSuchProcess):
                    continue
                if path:
                    return path
        except (psutil.Error, OSError) as exc:
            logger.debug("Executable lookup failed for %s: %s", name, exc)
        return None

    def stop_processes(self, names: Sequence[str]) -> None:
        """Force-kill every instance of each name in order.

        Instances that exit on their own (often a helper taken down with its
        front-end) are skipped. Names that could not be killed are reported
        together once the whole batch has been attempted.
        """
        failed: List[str] = []
        for name in names:
            try:
                matches = self._matching_processes(name)
            except (psutil.Error, OSError) as exc:
                logger.warning("Unable to enumerate %s for termination: %s", name, exc)
                failed.append(name)
                continue
            if not matches:
                logger.debug("%s already exited", name)
            for proc in matches:
                try:
                    proc.kill()
                except psutil.NoSuchProcess:
                    logger.debug("%s process %s exited before termination", name, proc.pid)
                except (psutil.Error, OSError) as exc:
                    logger.warning("Unable to kill %s process %s: %s", name, proc.pid, exc)
                    if name not in failed:
                        failed.append(name)
        if failed:
            raise HostCommandError(["kill", *failed], stderr="one or more processes could not be terminated")

    def start_processes(self, paths: Sequence[str]) -> None:
        self._runner.run(start_processes_script(paths))

    # -- scheduler ---------------------------------------------------------

    def read_scheduler_flag(self) -> Optional[int]:
        winreg = _import_winreg()
        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, SCHEDULER_REGISTRY_KEY, 0, winreg.KEY_READ) as key:
                value, _ = winreg.QueryValueEx(key, SCHEDULER_REGISTRY_VALUE)
        except OSError as exc:
            logger.warning("Unable to read scheduler start flag: %s", exc)
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("Scheduler start flag holds a non-integer value: %r", value)
            return None

    def write_scheduler_flag(self, value: int) -> None:
        winreg = _import_winreg()
        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, SCHEDULER_REGISTRY_KEY, 0, winreg.KEY_SET_VALUE) as key:
                winreg.SetValueEx(key, SCHEDULER_REGISTRY_VALUE, 0, winreg.REG_DWORD, int(value))
        except OSError as exc:
            raise HostControlError(f"Unable to write scheduler start flag: {exc}", value=value) from exc

    def scheduler_runner_active(self) -> ProbeResult:
        return self.service_running(SCHEDULER_SERVICE)


def _same_user(session_name: Optional[str], user: str) -> bool:
    if not session_name:
        return False
    # Sessions may be reported as DOMAIN\user.
    return session_name.rsplit("\\", 1)[-1].lower() == user.rsplit("\\", 1)[-1].lower()


def _import_winreg():
    if os.name != "nt":
        raise UnsupportedPlatformError("winreg")
    import winreg

    return winreg


__all__ = ["SCHEDULER_REGISTRY_KEY", "SCHEDULER_SERVICE", "WindowsHostControl"]
