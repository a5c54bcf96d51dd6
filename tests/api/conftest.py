"""API test fixtures: an app wired to the deterministic scheduler."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from smalljob.api.app import create_app
from smalljob.api.settings import SmallJobAPISettings
from smalljob.core.scheduling import Clock, SmallJobScheduler
from tests._support.fakes import ManualTimerBackend, RecordingJobBody


@pytest.fixture
def api_settings() -> SmallJobAPISettings:
    return SmallJobAPISettings(_env_file=None, default_sleep_seconds=20)


@pytest.fixture
def app_scheduler(
    clock: Clock,
    timer: ManualTimerBackend,
    job_body: RecordingJobBody,
) -> SmallJobScheduler:
    """Not started; the app lifespan starts and stops it."""
    return SmallJobScheduler(clock, timer, history_capacity=5, job_body=job_body)


@pytest.fixture
def app(api_settings: SmallJobAPISettings, app_scheduler: SmallJobScheduler) -> FastAPI:
    return create_app(settings=api_settings, scheduler=app_scheduler)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
