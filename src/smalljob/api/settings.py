"""
API-specific settings.

Extends :class:`~smalljob.core.settings.SmallJobSettings` with parameters
that govern the HTTP transport (prefix, OpenAPI metadata, CORS).

All values can be overridden via environment variables prefixed with
``SMALLJOB_`` (e.g. ``SMALLJOB_API_PREFIX``).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from smalljob.core.settings import SmallJobSettings


class SmallJobAPISettings(SmallJobSettings):
    """Settings for the smalljob HTTP API.

    Order of precedence (highest → lowest):
        1. Environment variables (``SMALLJOB_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/small/api", description="URL prefix for scheduler endpoints")
    api_title: str = Field(default="smalljob API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_prefix="SMALLJOB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )
