"""Build and run the PowerShell commands used for batched stop/start requests."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from ..exceptions import HostCommandError

logger = logging.getLogger(__name__)


def quote_literal(value: str) -> str:
    """Render *value* as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def escape_path(path: str) -> str:
    """Escape embedded spaces with the PowerShell backtick so the path stays one token."""
    return path.replace("`", "``").replace(" ", "` ")


def name_list(names: Sequence[str]) -> str:
    return ",".join(quote_literal(name) for name in names)


def stop_services_script(names: Sequence[str]) -> str:
    # Continue attempts every name; any error still makes powershell exit non-zero.
    return f"Stop-Service -Name {name_list(names)} -Force -ErrorAction Continue"


def start_services_script(names: Sequence[str]) -> str:
    return f"Start-Service -Name {name_list(names)} -ErrorAction Continue"


def start_processes_script(paths: Sequence[str]) -> str:
    return "; ".join(f"Start-Process -FilePath {escape_path(path)}" for path in paths)


@dataclass
class PowerShellRunner:
    """Run PowerShell scripts, raising HostCommandError on any failure."""

    executable: str = "powershell.exe"
    timeout_seconds: Optional[int] = None

    def build_command(self, script: str) -> list[str]:
        return [self.executable, "-NoProfile", "-NonInteractive", "-Command", script]

    def run(self, script: str) -> str:
        command = self.build_command(script)
        logger.debug("Running %s", script)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise HostCommandError(command, stderr=f"{self.executable} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise HostCommandError(command, stderr=f"timed out after {self.timeout_seconds}s") from exc

        if completed.returncode != 0:
            raise HostCommandError(command, returncode=completed.returncode, stderr=completed.stderr or "")
        return completed.stdout or ""


__all__ = [
    "PowerShellRunner",
    "escape_path",
    "quote_literal",
    "start_processes_script",
    "start_services_script",
    "stop_services_script",
]
