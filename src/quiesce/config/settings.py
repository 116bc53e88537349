"""Quiesce settings resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .runtime import env_seconds, env_str

DEFAULT_LOGON_WARMUP_SECONDS = 5 * 60
DEFAULT_TEARDOWN_DELAY_SECONDS = 90
DEFAULT_SNAPSHOT_PATH = Path("quiesce_snapshot.json")
DEFAULT_POWERSHELL = "powershell.exe"
DEFAULT_LOG_DIR = Path("logs")


@dataclass(frozen=True)
class QuiesceSettings:
    logon_warmup_seconds: int = DEFAULT_LOGON_WARMUP_SECONDS
    teardown_delay_seconds: int = DEFAULT_TEARDOWN_DELAY_SECONDS
    catalog_path: Optional[Path] = None
    snapshot_path: Path = DEFAULT_SNAPSHOT_PATH
    powershell: str = DEFAULT_POWERSHELL
    command_timeout_seconds: Optional[int] = None
    log_dir: Path = DEFAULT_LOG_DIR

    @classmethod
    def from_env(cls) -> "QuiesceSettings":
        """Build settings from QUIESCE_* variables, falling back to defaults."""
        catalog_raw = env_str("QUIESCE_CATALOG_PATH")
        return cls(
            logon_warmup_seconds=_seconds("QUIESCE_LOGON_WARMUP_SECONDS", DEFAULT_LOGON_WARMUP_SECONDS),
            teardown_delay_seconds=_seconds("QUIESCE_TEARDOWN_DELAY_SECONDS", DEFAULT_TEARDOWN_DELAY_SECONDS),
            catalog_path=Path(catalog_raw).expanduser() if catalog_raw else None,
            snapshot_path=Path(env_str("QUIESCE_SNAPSHOT_PATH", str(DEFAULT_SNAPSHOT_PATH))).expanduser(),
            powershell=env_str("QUIESCE_POWERSHELL", DEFAULT_POWERSHELL),
            command_timeout_seconds=env_seconds("QUIESCE_COMMAND_TIMEOUT_SECONDS"),
            log_dir=Path(env_str("QUIESCE_LOG_DIR", str(DEFAULT_LOG_DIR))).expanduser(),
        )


def _seconds(name: str, default: int) -> int:
    value = env_seconds(name, or_value=default)
    return default if value is None else value


__all__ = ["QuiesceSettings"]
