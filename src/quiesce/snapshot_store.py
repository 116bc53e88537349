"""Persist a snapshot between separate disable and enable invocations.

The file is the cross-process form of the single-use token: ``enable``
deletes it once the restore has run, so a second ``enable`` finds nothing.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

import orjson

from .exceptions import SnapshotError
from .models import ProcessRecord, ServiceRecord, Snapshot

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT_VERSION = 1


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "version": SNAPSHOT_FORMAT_VERSION,
        "services": [asdict(record) for record in snapshot.services],
        "processes": [asdict(record) for record in snapshot.processes],
    }


def _field(item: Any, key: str, expected: type, *, optional: bool = False) -> Any:
    value = item.get(key) if optional else item[key]
    if value is None and optional:
        return None
    if not isinstance(value, expected):
        raise SnapshotError(
            f"Snapshot field {key!r} must be {expected.__name__}, got {value!r}",
            field=key,
        )
    return value


def snapshot_from_dict(payload: Any) -> Snapshot:
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot payload must be an object")
    version = payload.get("version")
    if version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version {version!r}", version=version)
    try:
        services = tuple(
            ServiceRecord(
                name=_field(item, "name", str),
                existed=_field(item, "existed", bool),
                was_running=_field(item, "was_running", bool),
            )
            for item in payload["services"]
        )
        processes = tuple(
            ProcessRecord(
                name=_field(item, "name", str),
                existed=_field(item, "existed", bool),
                was_suspended=_field(item, "was_suspended", bool),
                executable_path=_field(item, "executable_path", str, optional=True),
            )
            for item in payload["processes"]
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise SnapshotError(f"Snapshot payload is malformed: {exc}") from exc
    return Snapshot(services=services, processes=processes)


def save_snapshot(snapshot: Snapshot, path: Path) -> None:
    if snapshot.consumed:
        raise SnapshotError("Refusing to persist a consumed snapshot", path=str(path))
    if path.exists():
        raise SnapshotError(
            f"Snapshot {path} already exists; run enable first or remove it by hand",
            path=str(path),
        )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(orjson.dumps(snapshot_to_dict(snapshot), option=orjson.OPT_INDENT_2))
    except OSError as exc:
        raise SnapshotError(f"Unable to write snapshot {path}: {exc}", path=str(path)) from exc
    logger.info("Saved snapshot to %s", path)


def load_snapshot(path: Path) -> Snapshot:
    if not path.exists():
        raise SnapshotError(f"No snapshot at {path}; nothing to restore", path=str(path))
    try:
        payload = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot {path} is not valid JSON", path=str(path)) from exc
    except OSError as exc:
        raise SnapshotError(f"Unable to read snapshot {path}: {exc}", path=str(path)) from exc
    return snapshot_from_dict(payload)


def consume_snapshot_file(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        logger.debug("Snapshot %s already removed", path)
        return
    except OSError as exc:
        raise SnapshotError(f"Unable to remove consumed snapshot {path}: {exc}", path=str(path)) from exc
    logger.info("Removed consumed snapshot %s", path)


__all__ = [
    "consume_snapshot_file",
    "load_snapshot",
    "save_snapshot",
    "snapshot_from_dict",
    "snapshot_to_dict",
]
