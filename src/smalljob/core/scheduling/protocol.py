"""Timer backend protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TIMER BACKEND PROTOCOL                                                       │
│                                                                               │
│  A backend controls only WHEN a callback runs.  The ScheduleSlot decides      │
│  WHAT is armed, and the ExecutionRunner decides what happens on firing.       │
│                                                                               │
│   ScheduleSlot.set()  ── arm(fire_at, cb) ──►  ┌───────────────────┐          │
│                                               │  Thread backend    │          │
│   ScheduleSlot.cancel() ── disarm(handle) ──► │  APScheduler       │          │
│                                               └─────────┬─────────┘          │
│                                                         │ cb()               │
│                                                         ▼                    │
│                                               ExecutionRunner.fire(gen)      │
│                                                                               │
│  Contract:                                                                    │
│  - arm() never blocks; it is called while the slot lock is held               │
│  - disarm() never waits for a callback that is already running               │
│  - a callback that fires after disarm() must be harmless (generation check)  │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

FireCallback = Callable[[], None]


@dataclass(frozen=True, slots=True)
class TimerHandle:
    """Opaque reference to one armed timer."""

    timer_id: str
    fire_at: datetime


@runtime_checkable
class TimerBackend(Protocol):
    """Protocol for pluggable single-shot timer backends.

    Implementations:
        - ThreadTimerBackend: one daemon thread per armed timer (default)
        - APSchedulerTimerBackend: APScheduler ``DateTrigger`` jobs
    """

    name: str

    def start(self) -> None:
        """Start the backend. Idempotent."""
        ...

    def stop(self) -> None:
        """Disarm everything and stop the backend."""
        ...

    def arm(self, fire_at: datetime, callback: FireCallback) -> TimerHandle:
        """Run ``callback`` once at ``fire_at`` (aware datetime)."""
        ...

    def disarm(self, handle: TimerHandle) -> bool:
        """Cancel an armed timer. Returns False if it already fired or was unknown."""
        ...

    def health(self) -> dict[str, Any]:
        """Return backend health status.

        Returns:
            dict with at least:
                - healthy: bool
                - backend: str
                - armed: int — timers waiting to fire
        """
        ...
