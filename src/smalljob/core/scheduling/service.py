"""SmallJobScheduler — composition of clock, slot, runner and ledger.

This is the object the API layer talks to.  It owns exactly one
:class:`ScheduleSlot` and never holds a lock itself; every consistency
guarantee comes from the slot and ledger it wraps.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from smalljob.core.logging import get_logger

from .clock import Clock
from .history import HistoryEntry, HistoryLedger
from .protocol import TimerBackend
from .runner import ExecutionRunner, JobBody
from .slot import CancelResult, ScheduleRequest, ScheduleSlot, SetResult, Status

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SchedulerStatus:
    """Everything a status query returns, read at one point in time."""

    status: Status
    scheduled_time: datetime | None
    current_time: datetime
    timezone: str
    history: list[HistoryEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "scheduled_time": self.scheduled_time.isoformat() if self.scheduled_time else None,
            "current_time": self.current_time.isoformat(),
            "timezone": self.timezone,
            "history": [entry.to_dict() for entry in self.history],
        }


class SmallJobScheduler:
    """Single-slot deferred job scheduler.

    Example:
        >>> scheduler = SmallJobScheduler(Clock("UTC"), ThreadTimerBackend())
        >>> scheduler.start()
        >>> scheduler.set(ScheduleRequest(target_time=in_one_minute, sleep_seconds=2))
        >>> scheduler.status().status
        <Status.SCHEDULED: 'Scheduled'>
        >>> scheduler.cancel().message
        'Schedule cleared'
        >>> scheduler.stop()
    """

    def __init__(
        self,
        clock: Clock,
        timer: TimerBackend,
        history_capacity: int = 5,
        job_body: JobBody | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.clock = clock
        self.timer = timer
        self.ledger = HistoryLedger(capacity=history_capacity)
        self.slot = ScheduleSlot(clock, timer)
        self.runner = ExecutionRunner(self.slot, self.ledger, clock, job_body=job_body, rng=rng)
        self._running = False

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        if self._running:
            logger.warning("scheduler_already_running")
            return
        self.timer.start()
        self._running = True
        logger.info(
            "scheduler_started",
            backend=self.timer.name,
            timezone=self.clock.timezone_name,
            history_capacity=self.ledger.capacity,
        )

    def stop(self) -> None:
        if not self._running:
            return
        self.slot.disarm()
        self.timer.stop()
        self._running = False
        logger.info("scheduler_stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    # ── Commands ─────────────────────────────────────────────────────────

    def set(self, request: ScheduleRequest) -> SetResult:
        return self.slot.set(request)

    def cancel(self) -> CancelResult:
        return self.slot.cancel()

    def status(self) -> SchedulerStatus:
        snapshot = self.slot.status()
        return SchedulerStatus(
            status=snapshot.status,
            scheduled_time=snapshot.scheduled_time,
            current_time=self.clock.now(),
            timezone=self.clock.timezone_name,
            history=self.ledger.entries(),
        )

    def history(self) -> list[HistoryEntry]:
        return self.ledger.entries()

    def health(self) -> dict[str, Any]:
        backend = self.timer.health()
        return {
            "healthy": self._running and bool(backend.get("healthy")),
            "status": self.slot.status().status.value,
            "executions": self.runner.executions,
            "failures": self.runner.failures,
            "timer": backend,
        }
