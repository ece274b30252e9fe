"""Clock abstraction for testing.

Install timestamps and backup suffixes read the current time through this
ABC so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Clock(ABC):
    """Abstract clock for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...
