"""Scheduler settings.

``SmallJobSettings`` holds everything the scheduler core needs: the server
timezone, the history capacity, and which timer backend arms jobs. The API
layer extends it with transport knobs (see :mod:`smalljob.api.settings`).

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not runtime
    - **Environment-driven:** Reads ``SMALLJOB_*`` env vars and ``.env``
    - **Sensible defaults:** Works out of the box for development

Examples:
    >>> from smalljob.core.settings import SmallJobSettings
    >>> SmallJobSettings(timezone="Europe/Berlin").history_capacity
    5

Tags:
    settings, configuration, pydantic, environment, smalljob
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmallJobSettings(BaseSettings):
    """Settings shared by the scheduler core, API and CLI.

    Fields
    ──────
    host              : Bind address for the HTTP server
    port              : Bind port for the HTTP server
    debug             : Expose exception details in 500 responses
    log_level         : Structlog log level
    log_json          : Force JSON (True) / console (False) logs; None = auto
    timezone          : IANA zone the server reports and interprets times in
    history_capacity  : Number of past executions kept (oldest evicted first)
    timer_backend     : ``thread`` or ``apscheduler``
    """

    model_config = SettingsConfigDict(
        env_prefix="SMALLJOB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8080

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Scheduling ───────────────────────────────────────────────
    timezone: str = Field(default="UTC", description="IANA timezone identifier")
    history_capacity: int = Field(default=5, ge=1, description="Max history entries kept")
    timer_backend: Literal["thread", "apscheduler"] = Field(
        default="thread",
        description="Backend used to arm the single-shot job timer",
    )
    default_sleep_seconds: int = Field(
        default=20,
        ge=0,
        description="Job pause used when a set request omits 'sleep'",
    )
