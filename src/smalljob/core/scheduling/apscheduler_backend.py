"""APScheduler-based timer backend.

Arms each job as a one-shot ``DateTrigger`` job on an APScheduler 3.x
``BackgroundScheduler``.  Select it with ``SMALLJOB_TIMER_BACKEND=apscheduler``.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Any

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from smalljob.core.logging import get_logger

from .protocol import FireCallback, TimerHandle

logger = get_logger(__name__)


class APSchedulerTimerBackend:
    """APScheduler-backed single-shot timers.

    Example::

        >>> backend = APSchedulerTimerBackend(timezone="UTC")
        >>> backend.start()
        >>> handle = backend.arm(fire_at, callback)
        >>> backend.disarm(handle)
        >>> backend.stop()
    """

    name: str = "apscheduler"

    def __init__(self, timezone: str = "UTC", max_workers: int = 2) -> None:
        self._scheduler = BackgroundScheduler(
            executors={
                # one job at a time, plus room for a stale firing to exit
                "default": ThreadPoolExecutor(max_workers=max_workers),
            },
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                # a late timer still runs; the slot decides if it is stale
                "misfire_grace_time": None,
            },
            timezone=timezone,
        )
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._fired_count = 0

    def start(self) -> None:
        if self._scheduler.running:
            logger.warning("apscheduler_backend_already_started")
            return
        self._scheduler.start()
        logger.info("apscheduler_backend_started")

    def arm(self, fire_at: datetime, callback: FireCallback) -> TimerHandle:
        timer_id = f"smalljob-timer-{next(self._ids)}"

        def _fire() -> None:
            with self._lock:
                self._fired_count += 1
            callback()

        self._scheduler.add_job(
            _fire,
            trigger=DateTrigger(run_date=fire_at),
            id=timer_id,
            name=timer_id,
        )
        logger.debug("timer_armed", timer_id=timer_id, fire_at=fire_at.isoformat())
        return TimerHandle(timer_id=timer_id, fire_at=fire_at)

    def disarm(self, handle: TimerHandle) -> bool:
        try:
            self._scheduler.remove_job(handle.timer_id)
        except JobLookupError:
            # already fired: DateTrigger jobs are removed once submitted
            return False
        logger.debug("timer_disarmed", timer_id=handle.timer_id)
        return True

    def stop(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.remove_all_jobs()
        self._scheduler.shutdown(wait=False)
        logger.info("apscheduler_backend_stopped")

    def health(self) -> dict[str, Any]:
        return {
            "healthy": self._scheduler.running,
            "backend": self.name,
            "armed": len(self._scheduler.get_jobs()),
            "fired_count": self._fired_count,
        }
