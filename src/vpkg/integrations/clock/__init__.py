from vpkg.integrations.clock.abc import Clock
from vpkg.integrations.clock.real import RealClock

__all__ = ["Clock", "RealClock"]
