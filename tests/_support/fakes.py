"""
Test doubles for smalljob tests.

- ``FakeNow``: a callable clock source tests can advance
- ``ManualTimerBackend``: a ``TimerBackend`` that fires only on request
- ``RecordingJobBody``: a job body that records pauses and can fail or block
- ``wait_for``: poll a predicate with a timeout (for real-thread tests)
"""

from __future__ import annotations

import itertools
import threading
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from smalljob.core.scheduling import TimerHandle


class FakeNow:
    """Callable returning a settable aware datetime."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


class ManualTimerBackend:
    """Timer backend that records armed callbacks and fires them on demand.

    ``callbacks`` keeps every callback ever armed, including disarmed ones,
    so tests can simulate a timer that fires after it was cancelled.
    """

    name = "manual"

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.armed: dict[str, TimerHandle] = {}
        self.callbacks: dict[str, Callable[[], None]] = {}
        self.disarmed: list[str] = []
        self.started = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.armed.clear()
        self.started = False

    def arm(self, fire_at: datetime, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(timer_id=f"manual-{next(self._ids)}", fire_at=fire_at)
        self.armed[handle.timer_id] = handle
        self.callbacks[handle.timer_id] = callback
        return handle

    def disarm(self, handle: TimerHandle) -> bool:
        if self.armed.pop(handle.timer_id, None) is None:
            return False
        self.disarmed.append(handle.timer_id)
        return True

    def fire(self, timer_id: str) -> None:
        """Invoke a callback by id, armed or not."""
        self.armed.pop(timer_id, None)
        self.callbacks[timer_id]()

    def fire_latest(self) -> None:
        """Fire the one currently armed timer."""
        assert len(self.armed) == 1, f"expected exactly one armed timer, got {list(self.armed)}"
        self.fire(next(iter(self.armed)))

    def health(self) -> dict[str, Any]:
        return {"healthy": self.started, "backend": self.name, "armed": len(self.armed)}


class RecordingJobBody:
    """Job body double: records pauses, optionally raises or blocks."""

    def __init__(self) -> None:
        self.pauses: list[float] = []
        self.error: BaseException | None = None
        self.gate: threading.Event | None = None
        self.entered = threading.Event()

    def __call__(self, pause_seconds: float) -> None:
        self.pauses.append(pause_seconds)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5.0)
        if self.error is not None:
            raise self.error


def wait_for(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.01) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
