"""
Scheduler router — the command surface of the single job slot.

GET  /status
POST /set
POST /cancel

Mounted under ``settings.api_prefix`` (default ``/small/api``).
"""

from __future__ import annotations

from fastapi import APIRouter

from smalljob.api.deps import Scheduler, Settings
from smalljob.api.schemas.common import ProblemDetail
from smalljob.api.schemas.small import (
    CancelResponse,
    SetScheduleBody,
    SetScheduleResponse,
    StatusResponse,
)
from smalljob.core.errors import InvalidRequestError
from smalljob.core.scheduling import ScheduleRequest

router = APIRouter()


@router.get("/status", response_model=StatusResponse)
def get_status(scheduler: Scheduler):
    """Current slot status, server clock and recent history.

    Never blocks on a running job.  ``history`` is ordered newest first.

    Example:
        GET /small/api/status

        Response:
        {
            "status": "Scheduled",
            "scheduledTime": "2026-10-19T14:30:00+02:00",
            "currentTime": "2026-10-19T14:29:12.512034+02:00",
            "timezone": "Europe/Berlin",
            "history": [
                {"scheduledTime": "2026-10-19T13:00:00+02:00", "status": "Completed", "error": null, ...}
            ]
        }
    """
    return StatusResponse.from_status(scheduler.status())


@router.post(
    "/set",
    response_model=SetScheduleResponse,
    responses={400: {"model": ProblemDetail}, 409: {"model": ProblemDetail}},
)
def set_schedule(body: SetScheduleBody, scheduler: Scheduler, settings: Settings):
    """Schedule the job, replacing any pending one.

    ``time`` without an offset (the browser's ``datetime-local`` value) is
    read as wall-clock time in the server timezone.

    Raises:
        400 VALIDATION_FAILED: unparseable or non-future time, negative durations.
        409 CONFLICT: a job is running right now.

    Example:
        POST /small/api/set
        {"time": "2026-10-19T14:30", "sleep": 20, "randomSleep": 5}

        Response:
        {
            "message": "Schedule set",
            "scheduledTime": "2026-10-19T14:30:00+02:00",
            "serverTime": "2026-10-19T14:29:12.512034+02:00",
            "timezone": "Europe/Berlin"
        }
    """
    try:
        target_time = scheduler.clock.parse(body.time)
    except ValueError as e:
        raise InvalidRequestError(
            f"Invalid ISO-8601 time: {body.time!r}", field="time", value=body.time, cause=e
        ) from e

    sleep = body.sleep if body.sleep is not None else settings.default_sleep_seconds
    result = scheduler.set(
        ScheduleRequest(
            target_time=target_time,
            sleep_seconds=sleep,
            random_jitter_seconds=body.random_sleep,
        )
    )
    return SetScheduleResponse(
        scheduled_time=result.accepted_time.isoformat(),
        server_time=result.server_time.isoformat(),
        timezone=result.timezone,
    )


@router.post("/cancel", response_model=CancelResponse)
def cancel_schedule(scheduler: Scheduler):
    """Cancel the pending job.  Never fails; a running job is left alone.

    Example:
        POST /small/api/cancel

        Response:
        {"message": "Schedule cleared"}
    """
    return CancelResponse(message=scheduler.cancel().message)
