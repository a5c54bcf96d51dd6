"""Tests for SmallJobScheduler, the factory, and real-thread scenarios."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from smalljob.core.errors import ConfigError, SlotBusyError
from smalljob.core.scheduling import (
    Clock,
    Outcome,
    ScheduleRequest,
    SmallJobScheduler,
    Status,
    ThreadTimerBackend,
    create_scheduler,
    create_timer_backend,
)
from smalljob.core.settings import SmallJobSettings
from tests._support.fakes import RecordingJobBody, wait_for

NOON = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class TestSmallJobScheduler:
    def test_initial_status_is_idle(self, scheduler):
        st = scheduler.status()
        assert st.status is Status.IDLE
        assert st.scheduled_time is None
        assert st.current_time == NOON
        assert st.timezone == "UTC"
        assert st.history == []

    def test_status_to_dict(self, scheduler, timer):
        scheduler.set(ScheduleRequest(NOON + timedelta(minutes=1)))
        data = scheduler.status().to_dict()
        assert data == {
            "status": "Scheduled",
            "scheduled_time": "2026-10-19T12:01:00+00:00",
            "current_time": "2026-10-19T12:00:00+00:00",
            "timezone": "UTC",
            "history": [],
        }

    def test_start_and_stop(self, clock, timer):
        sched = SmallJobScheduler(clock, timer)
        assert not sched.is_running
        sched.start()
        assert sched.is_running and timer.started
        sched.start()
        sched.stop()
        assert not sched.is_running and not timer.started

    def test_stop_disarms_pending_timer(self, clock, timer):
        sched = SmallJobScheduler(clock, timer)
        sched.start()
        sched.set(ScheduleRequest(NOON + timedelta(minutes=5)))
        sched.stop()
        assert timer.armed == {}
        assert len(timer.disarmed) == 1
        assert sched.status().status is Status.IDLE
        assert sched.status().scheduled_time is None

    def test_restart_after_stop_starts_idle(self, clock, timer, job_body):
        sched = SmallJobScheduler(clock, timer, job_body=job_body)
        sched.start()
        sched.set(ScheduleRequest(NOON + timedelta(minutes=5)))
        dropped_id = next(iter(timer.armed))
        sched.stop()

        sched.start()
        try:
            st = sched.status()
            assert st.status is Status.IDLE
            assert st.scheduled_time is None

            timer.fire(dropped_id)
            assert job_body.pauses == []

            result = sched.set(ScheduleRequest(NOON + timedelta(minutes=6)))
            assert result.replaced is False
            assert len(timer.armed) == 1
            timer.fire_latest()
            assert job_body.pauses == [20]
        finally:
            sched.stop()

    def test_health_reports_counters(self, scheduler, timer, job_body):
        scheduler.set(ScheduleRequest(NOON + timedelta(minutes=1)))
        timer.fire_latest()
        job_body.error = ValueError("nope")
        scheduler.set(ScheduleRequest(NOON + timedelta(minutes=2)))
        timer.fire_latest()

        health = scheduler.health()
        assert health["healthy"] is True
        assert health["status"] == "Idle"
        assert health["executions"] == 2
        assert health["failures"] == 1
        assert health["timer"]["backend"] == "manual"

    def test_health_unhealthy_when_stopped(self, clock, timer):
        assert SmallJobScheduler(clock, timer).health()["healthy"] is False


class TestFactory:
    def test_default_backend_is_thread(self):
        backend = create_timer_backend(SmallJobSettings())
        assert isinstance(backend, ThreadTimerBackend)

    def test_apscheduler_backend_selected(self):
        backend = create_timer_backend(SmallJobSettings(timer_backend="apscheduler"))
        assert backend.name == "apscheduler"

    def test_create_scheduler_uses_settings(self):
        settings = SmallJobSettings(timezone="Europe/Berlin", history_capacity=7)
        sched = create_scheduler(settings)
        assert sched.clock.timezone_name == "Europe/Berlin"
        assert sched.ledger.capacity == 7
        assert not sched.is_running

    def test_unknown_timezone_is_config_error(self):
        with pytest.raises(ConfigError):
            create_scheduler(SmallJobSettings(timezone="Mars/Olympus_Mons"))


@pytest.mark.slow
class TestRealTimers:
    """End-to-end scenarios with the real clock and thread backend."""

    def _in(self, seconds: float) -> datetime:
        return datetime.now(UTC) + timedelta(seconds=seconds)

    def test_scheduled_job_runs_and_returns_to_idle(self, live_scheduler):
        live_scheduler.set(ScheduleRequest(self._in(0.2), sleep_seconds=0))
        assert live_scheduler.status().status is Status.SCHEDULED

        assert wait_for(lambda: len(live_scheduler.history()) == 1)
        assert wait_for(lambda: live_scheduler.status().status is Status.IDLE)
        entry = live_scheduler.history()[0]
        assert entry.status is Outcome.COMPLETED
        assert entry.started_at >= entry.scheduled_time

    def test_cancel_before_fire_stays_idle(self, live_scheduler):
        live_scheduler.set(ScheduleRequest(self._in(0.3), sleep_seconds=0))
        live_scheduler.cancel()

        assert not wait_for(lambda: len(live_scheduler.history()) > 0, timeout=0.7)
        assert live_scheduler.status().status is Status.IDLE

    def test_replacement_runs_only_latest(self, live_scheduler):
        first = self._in(0.2)
        second = self._in(0.4)
        live_scheduler.set(ScheduleRequest(first, sleep_seconds=0))
        live_scheduler.set(ScheduleRequest(second, sleep_seconds=0))

        assert wait_for(lambda: len(live_scheduler.history()) == 1)
        assert not wait_for(lambda: len(live_scheduler.history()) > 1, timeout=0.5)
        assert live_scheduler.history()[0].scheduled_time == second

    def test_set_and_cancel_while_working(self):
        body = RecordingJobBody()
        body.gate = threading.Event()
        sched = SmallJobScheduler(Clock("UTC"), ThreadTimerBackend(join_timeout=1.0), job_body=body)
        sched.start()
        try:
            sched.set(ScheduleRequest(self._in(0.1), sleep_seconds=0))
            assert body.entered.wait(2.0)
            assert sched.status().status is Status.WORKING

            with pytest.raises(SlotBusyError):
                sched.set(ScheduleRequest(self._in(60)))
            assert sched.cancel().cancelled is False
            assert sched.status().status is Status.WORKING

            body.gate.set()
            assert wait_for(lambda: sched.status().status is Status.IDLE)
            assert len(sched.history()) == 1
        finally:
            body.gate.set()
            sched.stop()

    def test_failure_recorded_with_real_timer(self):
        body = RecordingJobBody()
        body.error = OSError("device gone")
        sched = SmallJobScheduler(Clock("UTC"), ThreadTimerBackend(join_timeout=1.0), job_body=body)
        sched.start()
        try:
            sched.set(ScheduleRequest(self._in(0.1)))
            assert wait_for(lambda: len(sched.history()) == 1)
            entry = sched.history()[0]
            assert entry.status is Outcome.FAILED
            assert entry.error == "device gone"
            assert wait_for(lambda: sched.status().status is Status.IDLE)
        finally:
            sched.stop()

    def test_restart_with_real_timer_does_not_strand_schedule(self):
        sched = SmallJobScheduler(Clock("UTC"), ThreadTimerBackend(join_timeout=1.0))
        sched.start()
        sched.set(ScheduleRequest(self._in(0.3), sleep_seconds=0))
        sched.stop()
        sched.start()
        try:
            assert sched.status().status is Status.IDLE
            assert not wait_for(lambda: len(sched.history()) > 0, timeout=0.8)

            sched.set(ScheduleRequest(self._in(0.1), sleep_seconds=0))
            assert wait_for(lambda: len(sched.history()) == 1)
        finally:
            sched.stop()
