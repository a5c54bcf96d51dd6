"""
Scheduler API schemas.

Field names are snake_case in Python and camelCase on the wire
(``scheduledTime``, ``randomSleep``) to match the browser client.
All timestamps are ISO-8601 strings with an explicit UTC offset in the
server's timezone, always accompanied by the ``timezone`` identifier.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smalljob.core.scheduling import HistoryEntry, SchedulerStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


# ── Requests ─────────────────────────────────────────────────────────────


class SetScheduleBody(_CamelModel):
    time: str = Field(description="Target time, ISO-8601; naive values are server-local")
    sleep: int | None = Field(default=None, description="Base job pause in seconds")
    random_sleep: int = Field(default=0, description="Upper bound of random extra pause in seconds")


# ── Responses ────────────────────────────────────────────────────────────


class HistoryItemSchema(_CamelModel):
    scheduled_time: str
    status: str = Field(description="'Completed' or 'Failed'")
    error: str | None = None
    actual_start_time: str | None = None
    actual_end_time: str | None = None
    pause_seconds: float | None = None

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> HistoryItemSchema:
        return cls(
            scheduled_time=entry.scheduled_time.isoformat(),
            status=entry.status.value,
            error=entry.error,
            actual_start_time=_iso(entry.started_at),
            actual_end_time=_iso(entry.finished_at),
            pause_seconds=entry.pause_seconds,
        )


class StatusResponse(_CamelModel):
    """Current slot state plus history, newest execution first."""

    status: str = Field(description="'Idle', 'Scheduled' or 'Working'")
    scheduled_time: str | None = None
    current_time: str
    timezone: str
    history: list[HistoryItemSchema] = Field(default_factory=list)

    @classmethod
    def from_status(cls, status: SchedulerStatus) -> StatusResponse:
        return cls(
            status=status.status.value,
            scheduled_time=_iso(status.scheduled_time),
            current_time=status.current_time.isoformat(),
            timezone=status.timezone,
            history=[HistoryItemSchema.from_entry(e) for e in status.history],
        )


class SetScheduleResponse(_CamelModel):
    message: str = "Schedule set"
    scheduled_time: str
    server_time: str
    timezone: str


class CancelResponse(_CamelModel):
    message: str
