"""
Shared pytest fixtures and configuration for smalljob tests.

This module provides:
- A controllable clock (``fake_now`` / ``clock``)
- A manual timer backend that only fires when a test says so
- Pre-wired schedulers for deterministic and real-thread tests

Usage:
    def test_something(scheduler, timer):
        scheduler.set(ScheduleRequest(...))
        timer.fire_latest()
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Ensure smalljob package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from smalljob.core.scheduling import (  # noqa: E402
    Clock,
    SmallJobScheduler,
    ThreadTimerBackend,
)
from tests._support.fakes import FakeNow, ManualTimerBackend, RecordingJobBody  # noqa: E402


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if str(test_path).startswith("api"):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Clock / timer fixtures
# =============================================================================


@pytest.fixture
def fake_now() -> FakeNow:
    """Controllable 'now', starting at 2026-10-19 12:00:00 UTC."""
    return FakeNow(datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def clock(fake_now: FakeNow) -> Clock:
    return Clock("UTC", now_fn=fake_now)


@pytest.fixture
def timer() -> ManualTimerBackend:
    return ManualTimerBackend()


@pytest.fixture
def job_body() -> RecordingJobBody:
    return RecordingJobBody()


# =============================================================================
# Scheduler fixtures
# =============================================================================


@pytest.fixture
def scheduler(
    clock: Clock,
    timer: ManualTimerBackend,
    job_body: RecordingJobBody,
) -> Generator[SmallJobScheduler, None, None]:
    """Deterministic scheduler: fake clock, manual timer, recording job body."""
    sched = SmallJobScheduler(clock, timer, history_capacity=3, job_body=job_body)
    sched.start()
    yield sched
    sched.stop()


@pytest.fixture
def live_scheduler() -> Generator[SmallJobScheduler, None, None]:
    """Real clock and real thread timers; job body is a zero-length sleep."""
    sched = SmallJobScheduler(Clock("UTC"), ThreadTimerBackend(join_timeout=1.0), history_capacity=5)
    sched.start()
    yield sched
    sched.stop()
