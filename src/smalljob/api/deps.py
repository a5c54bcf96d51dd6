"""
FastAPI dependency injection — settings singleton and the scheduler.

Usage in routers::

    from smalljob.api.deps import Scheduler

    @router.get("/status")
    def status(scheduler: Scheduler):
        ...

Manifesto:
    Routers own no state.  The one scheduler instance lives on
    ``app.state`` and is handed to endpoints through a dependency so
    tests can swap it without touching module globals.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from smalljob.api.settings import SmallJobAPISettings
from smalljob.core.scheduling import SmallJobScheduler

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> SmallJobAPISettings:
    """Cached settings — loaded once per process."""
    return SmallJobAPISettings()


# ── Scheduler (per-app singleton) ────────────────────────────────────────


def get_scheduler(request: Request) -> SmallJobScheduler:
    """Return the scheduler created by :func:`smalljob.api.app.create_app`."""
    return request.app.state.scheduler


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[SmallJobAPISettings, Depends(get_settings)]
Scheduler = Annotated[SmallJobScheduler, Depends(get_scheduler)]
