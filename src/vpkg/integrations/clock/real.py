"""Real clock using the system time."""

from datetime import datetime

from vpkg.integrations.clock.abc import Clock


class RealClock(Clock):
    """Production implementation reading the local system time."""

    def now(self) -> datetime:
        return datetime.now().astimezone()
