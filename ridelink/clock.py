"""Time sources for the RideLink services."""

from datetime import datetime, timedelta
from typing import Optional


class Clock:
    """Wall clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """
    Clock that only moves when told to.

    Used wherever expiry has to be exercised deterministically.
    """

    def __init__(self, current: Optional[datetime] = None):
        self.current = current or datetime(2024, 1, 1, 12, 0, 0)

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by a timedelta built from kwargs."""
        self.current = self.current + timedelta(**kwargs)
        return self.current
