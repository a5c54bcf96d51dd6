"""Schedule slot — the single reservable scheduling state.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SLOT STATE MACHINE                                                           │
│                                                                               │
│              set()                    timer fires                             │
│    ┌──────┐ ──────► ┌───────────┐ ─────────────► ┌─────────┐                  │
│    │ Idle │         │ Scheduled │                │ Working │                  │
│    └──────┘ ◄────── └───────────┘                └─────────┘                  │
│       ▲     cancel()   │     ▲                        │                       │
│       │                └─────┘ set() (replace)        │                       │
│       └───────────────────────────────────────────────┘                       │
│                         job body done (success or failure)                    │
│                                                                               │
│  Every transition is one critical section on ``_lock``.  The generation       │
│  counter is bumped on every set/cancel; a timer armed for an older            │
│  generation finds a mismatch when it fires and exits without acting.          │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from smalljob.core.errors import (
    IllegalTransitionError,
    InvalidRequestError,
    SlotBusyError,
)
from smalljob.core.logging import get_logger

from .clock import Clock
from .protocol import TimerBackend, TimerHandle

logger = get_logger(__name__)


class Status(str, Enum):
    IDLE = "Idle"
    SCHEDULED = "Scheduled"
    WORKING = "Working"


_ALLOWED_TRANSITIONS: frozenset[tuple[Status, Status]] = frozenset(
    {
        (Status.IDLE, Status.SCHEDULED),
        (Status.SCHEDULED, Status.SCHEDULED),
        (Status.SCHEDULED, Status.IDLE),
        (Status.SCHEDULED, Status.WORKING),
        (Status.WORKING, Status.IDLE),
    }
)

CANCELLED_MESSAGE = "Schedule cleared"
NOTHING_TO_CANCEL_MESSAGE = "No schedule to cancel"
ALREADY_RUNNING_MESSAGE = "Job is already running; nothing to cancel"


@dataclass(frozen=True, slots=True)
class ScheduleRequest:
    """A request to run the job once at ``target_time``."""

    target_time: datetime
    sleep_seconds: int = 20
    random_jitter_seconds: int = 0


@dataclass(frozen=True, slots=True)
class JobDescriptor:
    """What the runner needs to execute the job armed for ``generation``."""

    generation: int
    scheduled_time: datetime
    sleep_seconds: int
    random_jitter_seconds: int


@dataclass(frozen=True, slots=True)
class SlotSnapshot:
    """Consistent read of the slot taken under its lock."""

    status: Status
    scheduled_time: datetime | None
    sleep_seconds: int
    random_jitter_seconds: int
    generation: int


@dataclass(frozen=True, slots=True)
class SetResult:
    accepted_time: datetime
    timezone: str
    server_time: datetime
    replaced: bool


@dataclass(frozen=True, slots=True)
class CancelResult:
    message: str
    cancelled: bool


def _validate_duration(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"{name} must be an integer", field=name, value=value)
    if value < 0:
        raise InvalidRequestError(f"{name} must be >= 0", field=name, value=value)
    return value


class ScheduleSlot:
    """Holds at most one pending-or-running job.

    The slot arms the timer backend itself so that "install descriptor" and
    "arm timer" happen in the same critical section.  The callback it arms
    is supplied by the runner through :meth:`attach`.

    Example:
        >>> slot = ScheduleSlot(Clock("UTC"), ThreadTimerBackend())
        >>> runner = ExecutionRunner(slot, HistoryLedger(), Clock("UTC"))
        >>> slot.set(ScheduleRequest(target_time=tomorrow, sleep_seconds=2))
        >>> slot.status().status
        <Status.SCHEDULED: 'Scheduled'>
    """

    def __init__(self, clock: Clock, timer: TimerBackend) -> None:
        self._clock = clock
        self._timer = timer
        self._lock = threading.Lock()
        self._on_fire: Callable[[int], None] | None = None

        self._status = Status.IDLE
        self._scheduled_time: datetime | None = None
        self._sleep_seconds = 0
        self._random_jitter_seconds = 0
        self._generation = 0
        self._handle: TimerHandle | None = None

    def attach(self, on_fire: Callable[[int], None]) -> None:
        """Register the callable invoked with the armed generation on firing."""
        self._on_fire = on_fire

    # ── Commands ─────────────────────────────────────────────────────────

    def set(self, request: ScheduleRequest) -> SetResult:
        """Install ``request`` as the pending job, replacing any pending one.

        Raises:
            InvalidRequestError: past/present target time or negative durations.
            SlotBusyError: a job is currently running.
        """
        if self._on_fire is None:
            raise RuntimeError("ScheduleSlot has no runner attached")
        if not isinstance(request.target_time, datetime):
            raise InvalidRequestError(
                "target_time must be a datetime", field="time", value=request.target_time
            )
        sleep_seconds = _validate_duration("sleep", request.sleep_seconds)
        jitter_seconds = _validate_duration("randomSleep", request.random_jitter_seconds)
        target = self._clock.localize(request.target_time)

        with self._lock:
            now = self._clock.now()
            if target <= now:
                raise InvalidRequestError(
                    f"Scheduled time {target.isoformat()} is not in the future "
                    f"(server time {now.isoformat()})",
                    field="time",
                    value=target.isoformat(),
                )
            if self._status is Status.WORKING:
                raise SlotBusyError("A job is currently running; try again once it finishes").with_context(
                    generation=self._generation,
                    scheduled_time=self._scheduled_time.isoformat() if self._scheduled_time else None,
                )

            replaced = self._status is Status.SCHEDULED
            if self._handle is not None:
                self._timer.disarm(self._handle)
                self._handle = None

            self._transition(Status.SCHEDULED)
            self._generation += 1
            generation = self._generation
            self._scheduled_time = target
            self._sleep_seconds = sleep_seconds
            self._random_jitter_seconds = jitter_seconds

            on_fire = self._on_fire
            self._handle = self._timer.arm(target, lambda: on_fire(generation))

        logger.info(
            "schedule_replaced" if replaced else "schedule_set",
            generation=generation,
            scheduled_time=target.isoformat(),
            sleep_seconds=sleep_seconds,
            random_jitter_seconds=jitter_seconds,
        )
        return SetResult(
            accepted_time=target,
            timezone=self._clock.timezone_name,
            server_time=now,
            replaced=replaced,
        )

    def cancel(self) -> CancelResult:
        """Drop the pending job. Running jobs are never interrupted."""
        with self._lock:
            if self._status is Status.WORKING:
                return CancelResult(message=ALREADY_RUNNING_MESSAGE, cancelled=False)
            if self._status is Status.IDLE:
                return CancelResult(message=NOTHING_TO_CANCEL_MESSAGE, cancelled=False)

            if self._handle is not None:
                self._timer.disarm(self._handle)
                self._handle = None
            self._transition(Status.IDLE)
            self._generation += 1
            cancelled_time = self._scheduled_time
            self._scheduled_time = None

        logger.info(
            "schedule_cancelled",
            scheduled_time=cancelled_time.isoformat() if cancelled_time else None,
        )
        return CancelResult(message=CANCELLED_MESSAGE, cancelled=True)

    def status(self) -> SlotSnapshot:
        with self._lock:
            return SlotSnapshot(
                status=self._status,
                scheduled_time=self._scheduled_time,
                sleep_seconds=self._sleep_seconds,
                random_jitter_seconds=self._random_jitter_seconds,
                generation=self._generation,
            )

    # ── Runner transitions ───────────────────────────────────────────────

    def begin(self, generation: int) -> JobDescriptor | None:
        """Scheduled → Working if ``generation`` is still current.

        Returns None when the firing is stale (cancelled or replaced).
        """
        with self._lock:
            if self._status is not Status.SCHEDULED or self._generation != generation:
                return None
            if self._scheduled_time is None:
                raise IllegalTransitionError(
                    f"Slot is Scheduled at generation {generation} without a scheduled time"
                )
            self._transition(Status.WORKING)
            self._handle = None
            return JobDescriptor(
                generation=generation,
                scheduled_time=self._scheduled_time,
                sleep_seconds=self._sleep_seconds,
                random_jitter_seconds=self._random_jitter_seconds,
            )

    def finish(self, generation: int) -> None:
        """Working → Idle for the job started by :meth:`begin`."""
        with self._lock:
            if self._generation != generation:
                raise IllegalTransitionError(
                    f"finish() for generation {generation} but slot is at {self._generation}"
                )
            self._transition(Status.IDLE)
            self._scheduled_time = None

    def disarm(self) -> None:
        """Drop the pending job on shutdown.

        A Scheduled slot goes back to Idle so that a later restart never
        reports a job whose timer no longer exists.  A running job is left
        to finish.
        """
        with self._lock:
            if self._handle is not None:
                self._timer.disarm(self._handle)
                self._handle = None
            if self._status is not Status.SCHEDULED:
                return
            self._transition(Status.IDLE)
            self._generation += 1
            dropped_time = self._scheduled_time
            self._scheduled_time = None

        logger.warning(
            "schedule_dropped_on_shutdown",
            scheduled_time=dropped_time.isoformat() if dropped_time else None,
        )

    def _transition(self, new: Status) -> None:
        # caller holds self._lock
        if (self._status, new) not in _ALLOWED_TRANSITIONS:
            raise IllegalTransitionError(
                f"Illegal transition {self._status.value} -> {new.value}"
            )
        self._status = new
