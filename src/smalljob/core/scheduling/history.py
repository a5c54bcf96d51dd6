"""History ledger — bounded, append-only record of past executions.

┌──────────────────────────────────────────────────────────────────────────────┐
│  HISTORY LEDGER                                                               │
│                                                                               │
│   append(entry) ──►  deque(maxlen=capacity)  ──► entries()  (newest first)    │
│                        │                                                      │
│                        └── oldest entry silently evicted on overflow          │
│                                                                               │
│  Only the ExecutionRunner appends; API status reads take a snapshot.          │
│  Cancelled jobs never produce an entry.                                       │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from smalljob.core.errors import ConfigError


class Outcome(str, Enum):
    """Result of one execution attempt."""

    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Immutable record of one execution attempt."""

    scheduled_time: datetime
    status: Outcome
    error: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    pause_seconds: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "scheduled_time": self.scheduled_time.isoformat(),
            "status": self.status.value,
            "error": self.error,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "pause_seconds": self.pause_seconds,
        }


class HistoryLedger:
    """Thread-safe FIFO ledger capped at ``capacity`` entries.

    Example:
        >>> ledger = HistoryLedger(capacity=2)
        >>> for minute in (1, 2, 3):
        ...     ledger.append(HistoryEntry(datetime(2026, 1, 1, 0, minute), Outcome.COMPLETED))
        >>> [e.scheduled_time.minute for e in ledger.entries()]
        [3, 2]
    """

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 1:
            raise ConfigError(f"History capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: deque[HistoryEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, entry: HistoryEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> list[HistoryEntry]:
        """Snapshot of the ledger, newest first."""
        with self._lock:
            return list(reversed(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
