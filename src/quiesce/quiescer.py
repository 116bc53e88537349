"""Paired disable/enable entry points for quiescing a benchmark host.

Typical use::

    outcome = quiescer.disable()
    if not outcome.ok:
        raise SystemExit(outcome.message)
    run_workload()
    quiescer.enable(outcome.value)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .catalog import Catalog, load_catalog
from .config import QuiesceSettings
from .guard import PreconditionGuard, utc_now
from .host_control import HostControl
from .models import CancelReason, Cancelled, Completed, Outcome, SchedulerState, Snapshot
from .process_inventory import ProcessInventory
from .restorer import RestoreReport, Restorer
from .scheduler_toggle import SchedulerToggle, ToggleResult
from .service_inventory import ServiceInventory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnableSummary:
    report: RestoreReport
    scheduler: ToggleResult

    @property
    def pending_restart(self) -> bool:
        return self.scheduler.requires_restart


@dataclass
class QuiescerDependencies:
    """Container for all Quiescer collaborators."""

    guard: PreconditionGuard
    scheduler: SchedulerToggle
    services: ServiceInventory
    processes: ProcessInventory
    restorer: Restorer


class QuiescerDependenciesFactory:
    """Factory for creating Quiescer dependencies."""

    @staticmethod
    def create(
        host: HostControl,
        catalog: Catalog,
        settings: QuiesceSettings,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
    ) -> QuiescerDependencies:
        return QuiescerDependencies(
            guard=PreconditionGuard(host, warmup_seconds=settings.logon_warmup_seconds, clock=clock),
            scheduler=SchedulerToggle(host),
            services=ServiceInventory(
                host,
                high_latency_service=catalog.high_latency_service,
                teardown_delay_seconds=settings.teardown_delay_seconds,
                sleep=sleep,
            ),
            processes=ProcessInventory(host),
            restorer=Restorer(host),
        )


class Quiescer:
    """Orchestrates guard, scheduler toggle, inventories and restorer.

    Neither ``disable`` nor ``enable`` raises for guard refusals, probe
    failures, mutation failures or pending restarts; callers check
    ``outcome.ok``.
    """

    def __init__(self, catalog: Catalog, dependencies: QuiescerDependencies) -> None:
        self.catalog = catalog
        self._deps = dependencies

    @property
    def guard(self) -> PreconditionGuard:
        return self._deps.guard

    @property
    def scheduler(self) -> SchedulerToggle:
        return self._deps.scheduler

    def inspect(self) -> Snapshot:
        """Probe every catalog entry without stopping anything."""
        return Snapshot(
            services=self._deps.services.snapshot(self.catalog.services),
            processes=self._deps.processes.snapshot(self.catalog.processes),
        )

    def disable(self) -> Outcome[Snapshot]:
        verdict = self._deps.guard.evaluate()
        if not verdict.allowed:
            return Cancelled(verdict.reason, verdict.message)

        toggle = self._deps.scheduler.disable()
        if toggle.state is SchedulerState.PENDING_RESTART:
            return Cancelled(CancelReason.PENDING_RESTART, toggle.message)
        if toggle.state is SchedulerState.UNDEFINED:
            return Cancelled(CancelReason.UNDEFINED_SCHEDULER_STATE, toggle.message)

        services = self._deps.services.snapshot_and_stop(self.catalog.services)
        processes = self._deps.processes.snapshot_and_stop(self.catalog.processes)
        snapshot = Snapshot(services=services, processes=processes)
        logger.info(
            "Host quiesced: stopped %d services and %d processes",
            len(snapshot.running_services),
            len(snapshot.stopped_processes),
        )
        return Completed(snapshot)

    def enable(self, snapshot: Snapshot) -> Outcome[EnableSummary]:
        if snapshot.consumed:
            message = "Snapshot was already used to restore this host"
            logger.warning(message)
            return Cancelled(CancelReason.SNAPSHOT_CONSUMED, message)

        verdict = self._deps.guard.evaluate()
        if not verdict.allowed:
            return Cancelled(verdict.reason, verdict.message)

        report = self._deps.restorer.restore(snapshot)
        snapshot.consume()
        if not report.clean:
            logger.warning("Restore finished with failures: %s", ", ".join(report.failures))

        toggle = self._deps.scheduler.enable()
        logger.info(
            "Host restored: started %d services and %d processes",
            len(report.services_started),
            len(report.processes_started),
        )
        return Completed(EnableSummary(report=report, scheduler=toggle))


def create_quiescer(
    *,
    host: Optional[HostControl] = None,
    catalog: Optional[Catalog] = None,
    settings: Optional[QuiesceSettings] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], datetime] = utc_now,
) -> Quiescer:
    """Build a Quiescer, defaulting to the Windows backend and environment settings."""
    settings = settings or QuiesceSettings.from_env()
    if catalog is None:
        catalog = load_catalog(settings.catalog_path)
    if host is None:
        from .host_control import WindowsHostControl
        from .host_control.powershell import PowerShellRunner

        host = WindowsHostControl(PowerShellRunner(settings.powershell, settings.command_timeout_seconds))
    dependencies = QuiescerDependenciesFactory.create(host, catalog, settings, sleep=sleep, clock=clock)
    return Quiescer(catalog, dependencies)


__all__ = [
    "EnableSummary",
    "Quiescer",
    "QuiescerDependencies",
    "QuiescerDependenciesFactory",
    "create_quiescer",
]
