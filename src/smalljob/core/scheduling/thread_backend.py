"""Zero-dependency threading-based timer backend.

This is the DEFAULT backend. Each armed timer gets its own daemon thread
that sleeps on a ``threading.Event`` until the fire time; disarming sets
the event so the thread wakes up and exits without firing.

┌──────────────────────────────────────────────────────────────────────────────┐
│  THREAD TIMER                                                                 │
│                                                                               │
│   arm(fire_at, cb)                                                            │
│      │                                                                        │
│      ▼                                                                        │
│   ┌────────────────────────────────────────────────────────┐                 │
│   │  Daemon Thread "smalljob-timer-N"                       │                 │
│   │                                                         │                 │
│   │   if cancel_event.wait(delay):  return   ◄── disarm()   │                 │
│   │   cb()                          ◄── job body runs here  │                 │
│   └────────────────────────────────────────────────────────┘                 │
│                                                                               │
│  The job body runs on the timer thread, so API threads never wait on it.     │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import itertools
import threading
from datetime import UTC, datetime
from typing import Any

from smalljob.core.logging import get_logger

from .protocol import FireCallback, TimerHandle

logger = get_logger(__name__)


class ThreadTimerBackend:
    """One daemon thread per armed timer.

    Example:
        >>> backend = ThreadTimerBackend()
        >>> backend.start()
        >>> handle = backend.arm(datetime.now(UTC) + timedelta(seconds=5), lambda: print("fired"))
        >>> backend.disarm(handle)
        True
    """

    name = "thread"

    def __init__(self, join_timeout: float = 5.0) -> None:
        self._join_timeout = join_timeout
        self._lock = threading.Lock()
        self._armed: dict[str, tuple[threading.Event, threading.Thread]] = {}
        self._ids = itertools.count(1)
        self._fired_count = 0
        self._started = False

    def start(self) -> None:
        self._started = True

    def arm(self, fire_at: datetime, callback: FireCallback) -> TimerHandle:
        timer_id = f"smalljob-timer-{next(self._ids)}"
        cancel_event = threading.Event()
        delay = max(0.0, (fire_at - datetime.now(UTC)).total_seconds())

        def _wait_and_fire() -> None:
            if cancel_event.wait(delay):
                return
            with self._lock:
                if self._armed.pop(timer_id, None) is None:
                    return
                self._fired_count += 1
            try:
                callback()
            except Exception as e:
                logger.exception("timer_callback_failed", timer_id=timer_id, error=str(e))

        thread = threading.Thread(target=_wait_and_fire, daemon=True, name=timer_id)
        with self._lock:
            self._armed[timer_id] = (cancel_event, thread)
        thread.start()
        logger.debug("timer_armed", timer_id=timer_id, fire_at=fire_at.isoformat(), delay_s=round(delay, 3))
        return TimerHandle(timer_id=timer_id, fire_at=fire_at)

    def disarm(self, handle: TimerHandle) -> bool:
        with self._lock:
            entry = self._armed.pop(handle.timer_id, None)
        if entry is None:
            return False
        entry[0].set()
        logger.debug("timer_disarmed", timer_id=handle.timer_id)
        return True

    def stop(self) -> None:
        """Disarm every waiting timer and join their threads.

        A job body that is already running is not interrupted.
        """
        with self._lock:
            armed = list(self._armed.values())
            self._armed.clear()
        for cancel_event, _ in armed:
            cancel_event.set()
        for _, thread in armed:
            thread.join(timeout=self._join_timeout)
            if thread.is_alive():
                logger.warning("timer_thread_did_not_stop", thread=thread.name)
        self._started = False

    def health(self) -> dict[str, Any]:
        with self._lock:
            armed = len(self._armed)
        return {
            "healthy": self._started,
            "backend": self.name,
            "armed": armed,
            "fired_count": self._fired_count,
        }

    @property
    def armed_count(self) -> int:
        with self._lock:
            return len(self._armed)
