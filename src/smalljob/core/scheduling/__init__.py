"""Scheduler package for smalljob.

Manifesto:
    One slot, one timer, one job at a time.  The interesting part is not
    running the job but keeping ``set``/``cancel``/timer-fire races honest:
    every transition is a single critical section and every armed timer
    carries the generation it was armed for.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SMALLJOB SCHEDULER                                                           │
│                                                                               │
│   ┌────────────┐  set/cancel  ┌──────────────┐  arm/disarm  ┌─────────────┐  │
│   │ API router │ ───────────► │ ScheduleSlot │ ───────────► │ TimerBackend│  │
│   └────────────┘   status     └──────────────┘              └──────┬──────┘  │
│         │                         ▲     ▲                          │ fire    │
│         │                  begin  │     │ finish                   ▼         │
│         │                         └─────┴──────────────── ExecutionRunner    │
│         │                                                         │         │
│         └──────────── entries() ◄──── HistoryLedger ◄── append ───┘         │
│                                                                               │
│  Backends:                                                                    │
│   • thread (default)   one daemon thread per armed timer                     │
│   • apscheduler        BackgroundScheduler + DateTrigger                     │
└──────────────────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ Holding the slot lock while the job body runs
    ✅ ``begin()``/``finish()`` are separate critical sections
    ❌ Trusting a timer callback to still be current
    ✅ ``ScheduleSlot.begin(generation)`` rejects stale firings
    ❌ Constructing scheduler components individually
    ✅ ``create_scheduler(settings)`` factory function

Tags:
    smalljob, scheduling, single-slot, timers, state-machine
"""

from __future__ import annotations

from smalljob.core.settings import SmallJobSettings

from .clock import Clock
from .history import HistoryEntry, HistoryLedger, Outcome
from .protocol import TimerBackend, TimerHandle
from .runner import ExecutionRunner, JobBody, sleep_job
from .service import SchedulerStatus, SmallJobScheduler
from .slot import (
    CancelResult,
    JobDescriptor,
    ScheduleRequest,
    ScheduleSlot,
    SetResult,
    SlotSnapshot,
    Status,
)
from .thread_backend import ThreadTimerBackend


def __getattr__(name: str):  # noqa: N807
    """Lazy import the APScheduler backend so importing the package stays cheap."""
    if name == "APSchedulerTimerBackend":
        from .apscheduler_backend import APSchedulerTimerBackend

        return APSchedulerTimerBackend
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Clock
    "Clock",
    # History
    "HistoryEntry",
    "HistoryLedger",
    "Outcome",
    # Slot
    "Status",
    "ScheduleRequest",
    "ScheduleSlot",
    "SlotSnapshot",
    "JobDescriptor",
    "SetResult",
    "CancelResult",
    # Runner
    "ExecutionRunner",
    "JobBody",
    "sleep_job",
    # Backends
    "TimerBackend",
    "TimerHandle",
    "ThreadTimerBackend",
    "APSchedulerTimerBackend",
    # Service
    "SmallJobScheduler",
    "SchedulerStatus",
    "create_scheduler",
    "create_timer_backend",
]


def create_timer_backend(settings: SmallJobSettings) -> TimerBackend:
    """Build the timer backend named by ``settings.timer_backend``."""
    if settings.timer_backend == "apscheduler":
        from .apscheduler_backend import APSchedulerTimerBackend

        return APSchedulerTimerBackend(timezone=settings.timezone)
    return ThreadTimerBackend()


def create_scheduler(
    settings: SmallJobSettings | None = None,
    job_body: JobBody | None = None,
) -> SmallJobScheduler:
    """Factory function to create a fully wired scheduler.

    Example:
        >>> scheduler = create_scheduler(SmallJobSettings(timezone="Europe/Berlin"))
        >>> scheduler.start()
    """
    settings = settings or SmallJobSettings()
    return SmallJobScheduler(
        clock=Clock(settings.timezone),
        timer=create_timer_backend(settings),
        history_capacity=settings.history_capacity,
        job_body=job_body,
    )
