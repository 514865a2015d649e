"""Wall-clock port used for rate windows, staleness and dated storage paths.

Deadlines on scans and strips use the monotonic clock instead, see
:mod:`secure_ingest.resilience.timeouts`.
"""
from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...
    def today(self) -> date: ...


class SystemClock:
    """Timezone-aware UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now().date()


class FrozenClock:
    """Stands still until :meth:`advance` is called."""

    def __init__(self, start: datetime) -> None:
        self._current = start

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()

    def advance(self, **delta: float) -> None:
        """Move forward by ``timedelta(**delta)``, e.g. ``advance(seconds=901)``."""
        self._current += timedelta(**delta)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
