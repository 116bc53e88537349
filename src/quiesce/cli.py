"""Command line entry point for quiescing a benchmark host.

Usage:
    quiesce status
    quiesce disable [--snapshot PATH]
    quiesce enable [--snapshot PATH]
    quiesce run [--snapshot PATH] -- COMMAND [ARGS...]
"""

from __future__ import annotations

import argparse
import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import ConfigurationError, QuiesceSettings
from .exceptions import ApplicationError, SnapshotError
from .logging_config import setup_logging
from .models import Cancelled, Snapshot
from .quiescer import EnableSummary, Quiescer, create_quiescer
from .snapshot_store import consume_snapshot_file, load_snapshot, save_snapshot

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 2

QuiescerFactory = Callable[[QuiesceSettings], Quiescer]


def _default_factory(settings: QuiesceSettings) -> Quiescer:
    return create_quiescer(settings=settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quiesce", description="Quiesce background services around a benchmark run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output on the console")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show guard, scheduler and catalog state without changing anything")

    for name, help_text in (
        ("disable", "Stop running catalog entries and save a snapshot"),
        ("enable", "Restore the entries recorded in a snapshot"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--snapshot", type=Path, default=None, help="Snapshot file path")

    run = subparsers.add_parser("run", help="Disable, run a workload command, then enable")
    run.add_argument("--snapshot", type=Path, default=None, help="Snapshot file path")
    run.add_argument("workload", nargs=argparse.REMAINDER, help="Workload command (prefix with --)")
    return parser


def _report_cancelled(outcome: Cancelled) -> int:
    print(f"Cancelled ({outcome.reason.value}): {outcome.message}")
    return EXIT_CANCELLED


def _print_summary(summary: EnableSummary) -> None:
    report = summary.report
    print(f"Services started: {', '.join(report.services_started) or 'none'}")
    print(f"Processes started: {', '.join(report.processes_started) or 'none'}")
    if report.processes_skipped:
        print(f"Processes skipped: {', '.join(report.processes_skipped)}")
    if report.failures:
        print(f"Failed: {', '.join(report.failures)}")
    if summary.scheduler.message:
        print(summary.scheduler.message)


def cmd_status(quiescer: Quiescer) -> int:
    verdict = quiescer.guard.evaluate()
    print(f"Guard: {'ok' if verdict.allowed else verdict.message}")
    flag = quiescer.scheduler.current_flag()
    print(f"Scheduler flag: {flag.name if flag else 'undefined'}")
    snapshot = quiescer.inspect()
    for record in snapshot.services:
        state = "running" if record.was_running else ("stopped" if record.existed else "absent")
        print(f"  service {record.name}: {state}")
    for record in snapshot.processes:
        if not record.existed:
            state = "absent"
        elif record.was_suspended:
            state = "suspended"
        else:
            state = "running"
        print(f"  process {record.name}: {state}")
    return EXIT_OK


def _disable_to(quiescer: Quiescer, path: Path) -> Optional[Snapshot]:
    # Checked up front: once disable() has stopped things the snapshot must be writable.
    if path.exists():
        raise SnapshotError(f"Snapshot {path} already exists; run enable first or remove it by hand", path=str(path))
    outcome = quiescer.disable()
    if isinstance(outcome, Cancelled):
        _report_cancelled(outcome)
        return None
    snapshot = outcome.value
    try:
        save_snapshot(snapshot, path)
    except SnapshotError:
        logger.error("Snapshot could not be saved; restoring the host immediately")
        _restore_unsaved(quiescer, snapshot)
        raise
    print(f"Host quiesced; snapshot saved to {path}")
    return snapshot


def _restore_unsaved(quiescer: Quiescer, snapshot: Snapshot) -> None:
    outcome = quiescer.enable(snapshot)
    if isinstance(outcome, Cancelled):
        _report_cancelled(outcome)
        return
    print("Host restored because the snapshot could not be saved")
    _print_summary(outcome.value)


def _enable_from(quiescer: Quiescer, snapshot: Snapshot, path: Path) -> int:
    outcome = quiescer.enable(snapshot)
    if isinstance(outcome, Cancelled):
        return _report_cancelled(outcome)
    consume_snapshot_file(path)
    _print_summary(outcome.value)
    return EXIT_OK


def cmd_disable(quiescer: Quiescer, path: Path) -> int:
    return EXIT_OK if _disable_to(quiescer, path) is not None else EXIT_CANCELLED


def cmd_enable(quiescer: Quiescer, path: Path) -> int:
    return _enable_from(quiescer, load_snapshot(path), path)


def cmd_run(quiescer: Quiescer, path: Path, workload: Sequence[str]) -> int:
    command = list(workload)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        print("No workload command given")
        return EXIT_ERROR

    snapshot = _disable_to(quiescer, path)
    if snapshot is None:
        return EXIT_CANCELLED

    try:
        logger.info("Running workload: %s", " ".join(command))
        workload_rc = subprocess.run(command, check=False).returncode
    except OSError as exc:
        logger.error("Workload failed to start: %s", exc)
        workload_rc = EXIT_ERROR
    finally:
        enable_rc = _enable_from(quiescer, snapshot, path)

    if enable_rc != EXIT_OK:
        return enable_rc
    return workload_rc


def main(argv: Optional[List[str]] = None, *, factory: QuiescerFactory = _default_factory) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = QuiesceSettings.from_env()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}")
        return EXIT_ERROR

    setup_logging("quiesce", user_friendly=True, log_dir=settings.log_dir, verbose=args.verbose)
    snapshot_path = getattr(args, "snapshot", None) or settings.snapshot_path

    try:
        quiescer = factory(settings)
        if args.command == "status":
            return cmd_status(quiescer)
        if args.command == "disable":
            return cmd_disable(quiescer, snapshot_path)
        if args.command == "enable":
            return cmd_enable(quiescer, snapshot_path)
        return cmd_run(quiescer, snapshot_path, args.workload)
    except (ApplicationError, ConfigurationError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
