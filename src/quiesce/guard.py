"""Precondition gate evaluated before any host mutation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from .config.settings import DEFAULT_LOGON_WARMUP_SECONDS
from .host_control import HostControl
from .models import CancelReason

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_minutes(minutes: int) -> str:
    unit = "minute" if minutes == 1 else "minutes"
    return f"{minutes} {unit}"


def remaining_wait_minutes(elapsed_seconds: float, warmup_seconds: int) -> int:
    """Whole minutes left in the warm-up window, rounded up."""
    remaining = max(0.0, warmup_seconds - elapsed_seconds)
    return math.ceil(remaining / 60)


@dataclass(frozen=True)
class GuardVerdict:
    allowed: bool
    reason: Optional[CancelReason] = None
    message: str = ""


class PreconditionGuard:
    """
    Fail-closed gate for disable/enable.

    Both conditions must hold: the current session has been logged on for at
    least the warm-up window (catalog entries report false negatives until
    then), and the process is elevated. The gate is evaluated once per call;
    it never waits or retries.
    """

    def __init__(
        self,
        host: HostControl,
        *,
        warmup_seconds: int = DEFAULT_LOGON_WARMUP_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._host = host
        self._warmup_seconds = warmup_seconds
        self._clock = clock

    def evaluate(self) -> GuardVerdict:
        logon = self._host.last_logon_time()
        if logon is None:
            message = "Unable to determine the last logon time; refusing to touch host state"
            logger.warning(message)
            return GuardVerdict(False, CancelReason.TOO_SOON_AFTER_LOGON, message)

        if logon.tzinfo is None:
            logon = logon.replace(tzinfo=timezone.utc)
        elapsed = (self._clock() - logon).total_seconds()
        if elapsed < self._warmup_seconds:
            minutes = remaining_wait_minutes(elapsed, self._warmup_seconds)
            message = f"Logged on too recently; try again in {format_minutes(minutes)}"
            logger.warning(message)
            return GuardVerdict(False, CancelReason.TOO_SOON_AFTER_LOGON, message)

        if not self._host.is_elevated():
            message = "Administrator privileges are required; re-run from an elevated session"
            logger.warning(message)
            return GuardVerdict(False, CancelReason.NOT_ELEVATED, message)

        return GuardVerdict(True)

    def check(self) -> bool:
        return self.evaluate().allowed


__all__ = ["GuardVerdict", "PreconditionGuard", "format_minutes", "remaining_wait_minutes"]
