"""Catalog of background services and processes that get quiesced.

The catalog is data rather than control flow: inventories receive it as an
ordered structure so tests can substitute their own entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

from .config import ConfigurationError
from .config_loader import BaseConfigLoader

logger = logging.getLogger(__name__)

# Windows Search hands off to a protocol host that keeps indexing for 60-90s
# after the service itself reports stopped.
DEFAULT_HIGH_LATENCY_SERVICE = "WSearch"

DEFAULT_SERVICES: Tuple[str, ...] = (
    "WSearch",
    "SysMain",
    "DiagTrack",
    "wuauserv",
    "UsoSvc",
    "BITS",
    "DoSvc",
    "Spooler",
    "AdobeUpdateService",
    "AGSService",
    "gupdate",
    "gupdatem",
)

# Adobe Creative Cloud family first: the front-end respawns its helpers when
# they are stopped ahead of it.
DEFAULT_PROCESSES: Tuple[str, ...] = (
    "Creative Cloud",
    "CCXProcess",
    "CCLibrary",
    "CoreSync",
    "AdobeIPCBroker",
    "Adobe Desktop Service",
    "OneDrive",
    "Dropbox",
    "GoogleDriveFS",
)


@dataclass(frozen=True)
class Catalog:
    services: Tuple[str, ...]
    processes: Tuple[str, ...]
    high_latency_service: Optional[str] = None

    def __post_init__(self) -> None:
        for label, names in (("services", self.services), ("processes", self.processes)):
            if len(set(names)) != len(names):
                raise ConfigurationError.invalid_value(label, list(names), "Catalog entries must be unique")
        if self.high_latency_service is not None and self.high_latency_service not in self.services:
            raise ConfigurationError.invalid_value(
                "high_latency_service",
                self.high_latency_service,
                "It must also be listed under services",
            )


DEFAULT_CATALOG = Catalog(
    services=DEFAULT_SERVICES,
    processes=DEFAULT_PROCESSES,
    high_latency_service=DEFAULT_HIGH_LATENCY_SERVICE,
)


def _names(value: Any, label: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise ConfigurationError.invalid_format(label, repr(value), "a list of non-empty strings")
    return tuple(item.strip() for item in value)


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load a catalog from JSON, or return the built-in catalog when no path is given."""
    if path is None:
        return DEFAULT_CATALOG

    loader = BaseConfigLoader(path.parent)
    try:
        payload = loader.load_json_file(path.name)
    except FileNotFoundError as exc:
        raise ConfigurationError.load_failed("catalog", str(path)) from exc

    services = _names(loader.get_parameter(payload, "services"), "services")
    processes = _names(loader.get_parameter(payload, "processes"), "processes")
    high_latency = loader.get_parameter(payload, "high_latency_service", required=False)
    if high_latency is not None and not isinstance(high_latency, str):
        raise ConfigurationError.invalid_format("high_latency_service", repr(high_latency), "a string")

    catalog = Catalog(services=services, processes=processes, high_latency_service=high_latency)
    logger.info("Loaded catalog from %s (%d services, %d processes)", path, len(services), len(processes))
    return catalog


__all__ = ["Catalog", "DEFAULT_CATALOG", "load_catalog"]
