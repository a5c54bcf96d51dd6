"""Tests for APSchedulerTimerBackend."""

import threading
from datetime import UTC, datetime, timedelta

import pytest

from smalljob.core.scheduling import APSchedulerTimerBackend, TimerBackend


@pytest.fixture
def backend():
    b = APSchedulerTimerBackend(timezone="UTC")
    b.start()
    yield b
    b.stop()


class TestAPSchedulerTimerBackend:
    def test_implements_protocol(self):
        backend = APSchedulerTimerBackend()
        assert isinstance(backend, TimerBackend)
        assert backend.name == "apscheduler"

    def test_health_before_start(self):
        health = APSchedulerTimerBackend().health()
        assert health["healthy"] is False
        assert health["backend"] == "apscheduler"

    def test_armed_timer_fires(self, backend):
        fired = threading.Event()
        backend.arm(datetime.now(UTC) + timedelta(seconds=0.1), fired.set)
        assert fired.wait(3.0)
        assert backend.health()["fired_count"] == 1

    def test_disarm_prevents_firing(self, backend):
        fired = threading.Event()
        handle = backend.arm(datetime.now(UTC) + timedelta(seconds=0.5), fired.set)

        assert backend.health()["armed"] == 1
        assert backend.disarm(handle) is True
        assert backend.health()["armed"] == 0
        assert not fired.wait(1.0)

    def test_disarm_unknown_returns_false(self, backend):
        handle = backend.arm(datetime.now(UTC) + timedelta(hours=1), lambda: None)
        backend.disarm(handle)
        assert backend.disarm(handle) is False

    def test_double_start_ignored(self, backend):
        backend.start()
        assert backend.health()["healthy"] is True

    def test_stop_drops_pending_jobs(self):
        backend = APSchedulerTimerBackend()
        backend.start()
        backend.arm(datetime.now(UTC) + timedelta(hours=1), lambda: None)
        backend.stop()
        assert backend.health()["healthy"] is False
        backend.stop()
