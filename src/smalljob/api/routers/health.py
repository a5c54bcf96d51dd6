"""
Health router — liveness/readiness probes for container orchestration.

GET /health        scheduler + timer backend health (503 if unhealthy)
GET /health/live   always 200
GET /health/ready  503 until the scheduler has started
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from smalljob.api.deps import Scheduler, Settings

router = APIRouter(prefix="/health")

_START_TIME = time.monotonic()


@router.get("")
def health(scheduler: Scheduler, settings: Settings) -> JSONResponse:
    """Primary health — reports slot status and timer backend state."""
    report = scheduler.health()
    body = {
        "status": "healthy" if report["healthy"] else "unhealthy",
        "service": "smalljob",
        "version": settings.api_version,
        "uptime_s": round(time.monotonic() - _START_TIME, 1),
        "timestamp": datetime.now(UTC).isoformat(),
        "scheduler": report,
    }
    return JSONResponse(content=body, status_code=200 if report["healthy"] else 503)


@router.get("/live")
def liveness() -> dict[str, str]:
    """Liveness probe — the process is up."""
    return {"status": "alive"}


@router.get("/ready")
def readiness(scheduler: Scheduler) -> JSONResponse:
    """Readiness probe — 503 until the scheduler is running."""
    ready = scheduler.is_running
    return JSONResponse(
        content={"status": "ready" if ready else "not_ready"},
        status_code=200 if ready else 503,
    )
