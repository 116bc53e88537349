"""Quiesce background services and processes around a benchmarking run.

    from quiesce import disable, enable

    outcome = disable()
    if outcome.ok:
        run_benchmark()
        enable(outcome.value)
"""

from __future__ import annotations

from typing import Optional

from .catalog import DEFAULT_CATALOG, Catalog, load_catalog
from .models import (
    CancelReason,
    Cancelled,
    Completed,
    Outcome,
    ProbeResult,
    ProcessRecord,
    SchedulerFlag,
    SchedulerState,
    ServiceRecord,
    Snapshot,
)
from .quiescer import EnableSummary, Quiescer, create_quiescer

_default_quiescer: Optional[Quiescer] = None


def _get_default_quiescer() -> Quiescer:
    global _default_quiescer
    if _default_quiescer is None:
        _default_quiescer = create_quiescer()
    return _default_quiescer


def disable() -> Outcome[Snapshot]:
    """Quiesce the local host with the default Windows backend."""
    return _get_default_quiescer().disable()


def enable(snapshot: Snapshot) -> Outcome[EnableSummary]:
    """Restore the local host from a snapshot returned by :func:`disable`."""
    return _get_default_quiescer().enable(snapshot)


__all__ = [
    "CancelReason",
    "Cancelled",
    "Catalog",
    "Completed",
    "DEFAULT_CATALOG",
    "EnableSummary",
    "Outcome",
    "ProbeResult",
    "ProcessRecord",
    "Quiescer",
    "SchedulerFlag",
    "SchedulerState",
    "ServiceRecord",
    "Snapshot",
    "create_quiescer",
    "disable",
    "enable",
    "load_catalog",
]
