"""Fake Clock implementation for testing."""

from datetime import UTC, datetime, timedelta

from vpkg.integrations.clock.abc import Clock

DEFAULT_FAKE_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)


class FakeClock(Clock):
    """In-memory clock returning a fixed instant.

    advance() moves the instant forward so tests can produce distinct
    timestamps deterministically.
    """

    def __init__(self, now: datetime = DEFAULT_FAKE_NOW) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now = self._now + timedelta(seconds=seconds)
