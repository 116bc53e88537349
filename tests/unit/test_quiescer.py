"""End-to-end tests for the disable/enable cycle against the fake host."""

from __future__ import annotations

from datetime import timedelta

from quiesce.models import CancelReason, Cancelled, Completed, SchedulerState
from tests.helpers.fake_host import NOW, RUNNING, SUSPENDED


class TestDisable:
    def test_returns_snapshot_and_stops_running_entries(self, fake_host, make_quiescer):
        outcome = make_quiescer(fake_host).disable()

        assert isinstance(outcome, Completed)
        assert outcome.ok is True
        snapshot = outcome.value
        assert snapshot.running_services == ("WSearch", "SysMain")
        assert snapshot.stopped_processes == ("Creative Cloud", "CCXProcess", "OneDrive")
        assert fake_host.running_services() == set()
        assert fake_host.processes == {"Paused": SUSPENDED}

    def test_recent_logon_cancels_without_mutation(self, fake_host, make_quiescer):
        fake_host.logon = NOW - timedelta(minutes=1)

        outcome = make_quiescer(fake_host).disable()

        assert isinstance(outcome, Cancelled)
        assert outcome.ok is False
        assert outcome.reason is CancelReason.TOO_SOON_AFTER_LOGON
        assert fake_host.mutations == []

    def test_non_elevated_session_cancels_without_mutation(self, fake_host, make_quiescer):
        fake_host.elevated = False

        outcome = make_quiescer(fake_host).disable()

        assert outcome.reason is CancelReason.NOT_ELEVATED
        assert fake_host.mutations == []

    def test_enabled_scheduler_short_circuits(self, fake_host, make_quiescer):
        fake_host.flag = 2
        fake_host.runner_active = True

        outcome = make_quiescer(fake_host).disable()

        assert isinstance(outcome, Cancelled)
        assert outcome.reason is CancelReason.PENDING_RESTART
        assert fake_host.flag == 4
        assert [kind for kind, _ in fake_host.mutations] == ["write_scheduler_flag"]

    def test_undefined_scheduler_flag_cancels(self, fake_host, make_quiescer):
        fake_host.flag = 7

        outcome = make_quiescer(fake_host).disable()

        assert outcome.reason is CancelReason.UNDEFINED_SCHEDULER_STATE
        assert fake_host.mutations == []

    def test_high_latency_service_waits_once(self, fake_host, make_quiescer, sleep_recorder):
        make_quiescer(fake_host).disable()

        assert sleep_recorder.delays == [90]

    def test_no_wait_without_high_latency_service(self, fake_host, make_quiescer, sleep_recorder):
        fake_host.services["WSearch"] = False

        make_quiescer(fake_host).disable()

        assert sleep_recorder.delays == []


class TestEnable:
    def test_round_trip_restores_running_set(self, fake_host, make_quiescer):
        services_before = fake_host.running_services()
        processes_before = dict(fake_host.processes)
        quiescer = make_quiescer(fake_host)

        snapshot = quiescer.disable().value
        outcome = quiescer.enable(snapshot)

        assert isinstance(outcome, Completed)
        assert outcome.value.report.clean is True
        assert fake_host.running_services() == services_before
        assert fake_host.processes == processes_before

    def test_enable_flips_scheduler_back_with_pending_restart(self, fake_host, make_quiescer):
        quiescer = make_quiescer(fake_host)
        snapshot = quiescer.disable().value

        summary = quiescer.enable(snapshot).value

        assert summary.scheduler.state is SchedulerState.PENDING_RESTART
        assert summary.pending_restart is True
        assert fake_host.flag == 2

    def test_snapshot_is_single_use(self, fake_host, make_quiescer):
        quiescer = make_quiescer(fake_host)
        snapshot = quiescer.disable().value
        quiescer.enable(snapshot)
        calls_after_first = len(fake_host.calls)

        outcome = quiescer.enable(snapshot)

        assert isinstance(outcome, Cancelled)
        assert outcome.reason is CancelReason.SNAPSHOT_CONSUMED
        assert len(fake_host.calls) == calls_after_first

    def test_guard_refusal_keeps_snapshot_usable(self, fake_host, make_quiescer):
        quiescer = make_quiescer(fake_host)
        snapshot = quiescer.disable().value
        mutations_after_disable = len(fake_host.mutations)
        fake_host.elevated = False

        outcome = quiescer.enable(snapshot)

        assert outcome.reason is CancelReason.NOT_ELEVATED
        assert len(fake_host.mutations) == mutations_after_disable
        assert snapshot.consumed is False

        fake_host.elevated = True
        assert quiescer.enable(snapshot).ok is True

    def test_process_restarted_on_its_own_is_not_duplicated(self, fake_host, make_quiescer):
        quiescer = make_quiescer(fake_host)
        snapshot = quiescer.disable().value
        fake_host.processes["OneDrive"] = RUNNING

        quiescer.enable(snapshot)

        launched = [path for call in fake_host.calls_of("start_processes") for path in call]
        assert not any(path.endswith("OneDrive.exe") for path in launched)


def test_inspect_probes_without_mutation(fake_host, make_quiescer):
    snapshot = make_quiescer(fake_host).inspect()

    assert snapshot.running_services == ("WSearch", "SysMain")
    assert fake_host.mutations == []
