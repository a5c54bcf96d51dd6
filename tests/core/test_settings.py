"""Tests for SmallJobSettings."""

import pytest
from pydantic import ValidationError

from smalljob.core.settings import SmallJobSettings


class TestSmallJobSettings:
    def test_defaults(self, monkeypatch):
        for key in ("SMALLJOB_TIMEZONE", "SMALLJOB_HISTORY_CAPACITY", "SMALLJOB_TIMER_BACKEND"):
            monkeypatch.delenv(key, raising=False)
        s = SmallJobSettings(_env_file=None)
        assert s.host == "0.0.0.0"
        assert s.port == 8080
        assert s.timezone == "UTC"
        assert s.history_capacity == 5
        assert s.timer_backend == "thread"
        assert s.default_sleep_seconds == 20
        assert s.debug is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SMALLJOB_TIMEZONE", "America/New_York")
        monkeypatch.setenv("SMALLJOB_HISTORY_CAPACITY", "10")
        monkeypatch.setenv("SMALLJOB_TIMER_BACKEND", "apscheduler")
        s = SmallJobSettings(_env_file=None)
        assert s.timezone == "America/New_York"
        assert s.history_capacity == 10
        assert s.timer_backend == "apscheduler"

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValidationError):
            SmallJobSettings(_env_file=None, history_capacity=0)

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            SmallJobSettings(_env_file=None, timer_backend="celery")

    def test_rejects_negative_default_sleep(self):
        with pytest.raises(ValidationError):
            SmallJobSettings(_env_file=None, default_sleep_seconds=-1)
