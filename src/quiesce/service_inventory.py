"""Snapshot and stop the catalog's OS services."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from .config.settings import DEFAULT_TEARDOWN_DELAY_SECONDS
from .exceptions import HostCommandError
from .host_control import HostControl
from .models import ProbeResult, ServiceRecord

logger = logging.getLogger(__name__)


class ServiceInventory:
    """
    Record which catalog services exist and run, then stop the running ones.

    Probe failures degrade to negative results and never abort the loop. The
    stop is a single batched request covering only services that were
    running, so already-stopped services never produce errors.

    Stopping ``high_latency_service`` kicks off a secondary teardown that runs
    for 60-90 seconds; when it was part of the stopped set the inventory
    blocks for ``teardown_delay_seconds`` before returning.
    """

    def __init__(
        self,
        host: HostControl,
        *,
        high_latency_service: Optional[str] = None,
        teardown_delay_seconds: int = DEFAULT_TEARDOWN_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._host = host
        self._high_latency_service = high_latency_service
        self._teardown_delay_seconds = teardown_delay_seconds
        self._sleep = sleep

    def probe(self, name: str) -> ServiceRecord:
        existed = self._host.service_exists(name) is ProbeResult.PRESENT
        running = existed and self._host.service_running(name) is ProbeResult.PRESENT
        return ServiceRecord(name=name, existed=existed, was_running=running)

    def snapshot(self, catalog: Sequence[str]) -> Tuple[ServiceRecord, ...]:
        records = tuple(self.probe(name) for name in catalog)
        for record in records:
            logger.debug("Service %s existed=%s running=%s", record.name, record.existed, record.was_running)
        return records

    def snapshot_and_stop(self, catalog: Sequence[str]) -> Tuple[ServiceRecord, ...]:
        records = self.snapshot(catalog)
        running: List[str] = [record.name for record in records if record.was_running]
        if not running:
            logger.info("No catalog services running")
            return records

        logger.info("Stopping %d services: %s", len(running), ", ".join(running))
        try:
            self._host.stop_services(running)
        except HostCommandError as exc:
            logger.error("Batched service stop failed: %s", exc)

        if self._high_latency_service in running:
            logger.info(
                "Waiting %ss for %s teardown to finish",
                self._teardown_delay_seconds,
                self._high_latency_service,
            )
            self._sleep(self._teardown_delay_seconds)

        return records


__all__ = ["ServiceInventory"]
