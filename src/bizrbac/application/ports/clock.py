"""Clock port - injected so time restrictions and TTLs are testable."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current, timezone-aware local time."""

    def now(self) -> datetime: ...
