# adapters/utils/time_providers.py

"""
Time provider adapters - for getting the current wall-clock time
"""

from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from thermostat.domain.ports import TimeProvider


class SystemTimeProvider(TimeProvider):
    """
    Production time provider - uses real system time.

    The schedule is in local wall-clock time, so this returns local time:
    the system zone by default, or an explicit IANA zone.
    """

    def __init__(self, timezone_name: Optional[str] = None):
        """
        Args:
            timezone_name: e.g. "America/New_York"; None for the system zone

        Raises:
            zoneinfo.ZoneInfoNotFoundError: unknown zone name
        """
        self._zone = ZoneInfo(timezone_name) if timezone_name else None

    def now(self) -> datetime:
        if self._zone is not None:
            return datetime.now(self._zone)
        return datetime.now().astimezone()


class FixedTimeProvider(TimeProvider):
    """Clock for tests: stands still until moved."""

    def __init__(self, fixed_time: datetime):
        self._current_time = fixed_time

    def now(self) -> datetime:
        return self._current_time

    def advance(self, minutes: int):
        """Move the clock forward, e.g. across a schedule boundary."""
        self._current_time += timedelta(minutes=minutes)

    def set_time(self, new_time: datetime):
        self._current_time = new_time
