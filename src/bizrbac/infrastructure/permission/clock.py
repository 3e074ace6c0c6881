"""Wall clock in the business timezone."""

from datetime import datetime
from zoneinfo import ZoneInfo


class SystemClock:
    """Clock returning aware local time for the configured timezone."""

    def __init__(self, timezone: str = "UTC") -> None:
        self._tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz)
