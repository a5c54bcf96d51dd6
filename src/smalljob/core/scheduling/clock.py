"""Clock source — server time in the configured timezone.

The clock is the only place the scheduler asks "what time is it".  Every
timestamp it hands out is timezone-aware, so nothing downstream ever has
to guess which zone a bare local time belongs to.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from smalljob.core.errors import ConfigError

NowFn = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Clock:
    """Server clock bound to one IANA timezone.

    Example:
        >>> clock = Clock("Europe/Berlin")
        >>> clock.now().tzinfo.key
        'Europe/Berlin'
        >>> clock.localize(datetime(2026, 10, 19, 14, 30)).isoformat()
        '2026-10-19T14:30:00+02:00'
    """

    def __init__(self, timezone: str = "UTC", now_fn: NowFn | None = None) -> None:
        try:
            self._tz = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"Unknown timezone: {timezone!r}", cause=e) from e
        self._timezone_name = timezone
        self._now_fn = now_fn or _utc_now

    @property
    def timezone_name(self) -> str:
        """IANA identifier reported alongside every timestamp."""
        return self._timezone_name

    @property
    def tzinfo(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        """Current time, aware, in the configured zone."""
        current = self._now_fn()
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        return current.astimezone(self._tz)

    def localize(self, dt: datetime) -> datetime:
        """Pin ``dt`` to the configured zone.

        Naive values are wall-clock times in the server zone; aware values
        are converted into it.
        """
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self._tz)
        return dt.astimezone(self._tz)

    def parse(self, value: str) -> datetime:
        """Parse an ISO-8601 string and localize it.

        Raises:
            ValueError: if ``value`` is not ISO-8601.
        """
        return self.localize(datetime.fromisoformat(value))
