"""Execution runner — what happens when the job timer fires.

┌──────────────────────────────────────────────────────────────────────────────┐
│  fire(generation)                                                             │
│                                                                               │
│   1. slot.begin(generation)      Scheduled → Working   (or stale → return)    │
│   2. pause = sleep + U(0, jitter)  resolved now, not at set() time            │
│   3. job_body(pause)             outside the slot lock                        │
│        ├── ok        → HistoryEntry(Completed)                                │
│        └── exception → HistoryEntry(Failed, str(exc))                         │
│   4. ledger.append(entry)        failure here is fatal: logged + re-raised    │
│   5. slot.finish(generation)     Working → Idle, always                       │
└──────────────────────────────────────────────────────────────────────────────┘

There is no watchdog: a job body that never returns keeps the slot in
Working until the process exits.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable

from smalljob.core.errors import ExecutionFailure
from smalljob.core.logging import LogContext, get_logger

from .clock import Clock
from .history import HistoryEntry, HistoryLedger, Outcome
from .slot import JobDescriptor, ScheduleSlot

logger = get_logger(__name__)

JobBody = Callable[[float], None]


def sleep_job(pause_seconds: float) -> None:
    """Default job body: block for the resolved pause."""
    time.sleep(pause_seconds)


class ExecutionRunner:
    """Executes the job armed in a :class:`ScheduleSlot`.

    Args:
        slot: The slot whose timer callbacks this runner serves.
        ledger: Where outcomes are recorded.
        clock: Source of start/finish timestamps.
        job_body: Called with the resolved pause in seconds.
        rng: Random source for jitter (inject a seeded one in tests).
    """

    def __init__(
        self,
        slot: ScheduleSlot,
        ledger: HistoryLedger,
        clock: Clock,
        job_body: JobBody | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._slot = slot
        self._ledger = ledger
        self._clock = clock
        self._job_body = job_body or sleep_job
        self._rng = rng or random.Random()
        self._executions = 0
        self._failures = 0
        slot.attach(self.fire)

    @property
    def executions(self) -> int:
        return self._executions

    @property
    def failures(self) -> int:
        return self._failures

    def resolve_pause(self, job: JobDescriptor) -> float:
        jitter = self._rng.uniform(0, job.random_jitter_seconds) if job.random_jitter_seconds else 0.0
        return job.sleep_seconds + jitter

    def fire(self, generation: int) -> None:
        job = self._slot.begin(generation)
        if job is None:
            logger.debug("stale_timer_ignored", generation=generation)
            return

        with LogContext(generation=generation, scheduled_time=job.scheduled_time.isoformat()):
            try:
                entry, escaped = self._execute(job)
                self._record(entry)
                if escaped is not None:
                    raise escaped
            finally:
                self._slot.finish(generation)

    def _execute(self, job: JobDescriptor) -> tuple[HistoryEntry, BaseException | None]:
        """Run the job body and build its history entry.

        A ``BaseException`` that is not an ``Exception`` (``SystemExit``,
        ``KeyboardInterrupt``) is recorded as a failure and handed back so
        :meth:`fire` can re-raise it once the entry is stored.
        """
        started_at = self._clock.now()
        pause = self.resolve_pause(job)
        logger.info("job_started", pause_seconds=round(pause, 3))

        error: str | None = None
        escaped: BaseException | None = None
        try:
            self._job_body(pause)
        except BaseException as e:
            if not isinstance(e, Exception):
                escaped = e
            failure = ExecutionFailure(str(e) or e.__class__.__name__, cause=e)
            failure.with_context(generation=job.generation)
            error = failure.message
            logger.exception("job_failed", **failure.to_dict())

        finished_at = self._clock.now()
        if error is None:
            logger.info("job_completed", elapsed_s=round((finished_at - started_at).total_seconds(), 3))

        entry = HistoryEntry(
            scheduled_time=job.scheduled_time,
            status=Outcome.FAILED if error is not None else Outcome.COMPLETED,
            error=error,
            started_at=started_at,
            finished_at=finished_at,
            pause_seconds=round(pause, 3),
        )
        return entry, escaped

    def _record(self, entry: HistoryEntry) -> None:
        self._executions += 1
        if entry.status is Outcome.FAILED:
            self._failures += 1
        try:
            self._ledger.append(entry)
        except Exception:
            logger.critical("history_append_failed", entry=entry.to_dict(), exc_info=True)
            raise
