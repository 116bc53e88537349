"""Snapshot and force-stop the catalog's background processes."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .exceptions import HostCommandError
from .host_control import HostControl
from .models import ProbeResult, ProcessRecord

logger = logging.getLogger(__name__)


class ProcessInventory:
    """
    Record existence, suspension and executable path for each catalog process
    and force-stop the active ones.

    Catalog order is preserved end to end: front-end processes of a vendor
    family must go down before their helpers or the helpers get respawned.
    Suspended processes are left alone.
    """

    def __init__(self, host: HostControl) -> None:
        self._host = host

    def probe(self, name: str) -> ProcessRecord:
        if self._host.process_exists(name) is not ProbeResult.PRESENT:
            return ProcessRecord(name=name, existed=False, was_suspended=False)

        suspended = self._host.process_suspended(name) is ProbeResult.PRESENT
        path = self._host.process_executable(name)
        if path is None:
            logger.warning("Could not resolve executable path for %s; it will not be relaunched", name)
        return ProcessRecord(name=name, existed=True, was_suspended=suspended, executable_path=path)

    def snapshot(self, catalog: Sequence[str]) -> Tuple[ProcessRecord, ...]:
        records = tuple(self.probe(name) for name in catalog)
        for record in records:
            logger.debug(
                "Process %s existed=%s suspended=%s path=%s",
                record.name,
                record.existed,
                record.was_suspended,
                record.executable_path,
            )
        return records

    def snapshot_and_stop(self, catalog: Sequence[str]) -> Tuple[ProcessRecord, ...]:
        records = self.snapshot(catalog)
        active: List[str] = [record.name for record in records if record.existed and not record.was_suspended]
        suspended = [record.name for record in records if record.was_suspended]
        if suspended:
            logger.info("Leaving suspended processes alone: %s", ", ".join(suspended))
        if not active:
            logger.info("No catalog processes active")
            return records

        logger.info("Force-stopping %d processes: %s", len(active), ", ".join(active))
        try:
            self._host.stop_processes(active)
        except HostCommandError as exc:
            logger.error("Batched process stop failed: %s", exc)
        return records


__all__ = ["ProcessInventory"]
