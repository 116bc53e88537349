"""Bring back exactly what a snapshot says was stopped."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .exceptions import HostCommandError
from .host_control import HostControl
from .models import ProbeResult, ProcessRecord, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class RestoreReport:
    services_started: List[str] = field(default_factory=list)
    processes_started: List[str] = field(default_factory=list)
    processes_skipped: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        """True when every start request went through. Failures are best-effort, not fatal."""
        return not self.failures


class Restorer:
    """
    Restart services and processes recorded in a snapshot.

    Services go back with one batched start. Processes are relaunched in
    catalog order, each re-probed first so that helpers already spawned by an
    earlier entry are not started twice. Failures are logged and recorded on
    the report; nothing is retried.
    """

    def __init__(self, host: HostControl) -> None:
        self._host = host

    def restore(self, snapshot: Snapshot) -> RestoreReport:
        report = RestoreReport()
        self._restore_services(snapshot, report)
        for record in snapshot.processes:
            self._restore_process(record, report)
        return report

    def _restore_services(self, snapshot: Snapshot, report: RestoreReport) -> None:
        names = list(snapshot.running_services)
        if not names:
            return
        logger.info("Starting %d services: %s", len(names), ", ".join(names))
        try:
            self._host.start_services(names)
        except HostCommandError as exc:
            logger.error("Batched service start failed: %s", exc)
            report.failures.append("services")
            return
        report.services_started.extend(names)

    def _restore_process(self, record: ProcessRecord, report: RestoreReport) -> None:
        if not record.existed or record.was_suspended:
            return
        if record.executable_path is None:
            logger.warning("No executable path recorded for %s; skipping", record.name)
            report.processes_skipped.append(record.name)
            return
        if self._host.process_exists(record.name) is ProbeResult.PRESENT:
            logger.info("%s is already running; skipping", record.name)
            report.processes_skipped.append(record.name)
            return

        logger.info("Launching %s", record.executable_path)
        try:
            self._host.start_processes([record.executable_path])
        except HostCommandError as exc:
            logger.error("Launch of %s failed: %s", record.name, exc)
            report.failures.append(record.name)
            return
        report.processes_started.append(record.name)


__all__ = ["RestoreReport", "Restorer"]
