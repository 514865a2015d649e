"""Application rate limiting – RateWindow, RateLimitDecision, RateLimitResult."""
from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta
from enum import Enum


class RateLimitDecision(str, Enum):
    ALLOWED = "ALLOWED"
    DENIED = "DENIED"


@dataclasses.dataclass(frozen=True)
class RateWindow:
    """Fixed-window rule: at most ``limit`` requests per ``window_seconds``."""
    limit: int
    window_seconds: float

    @property
    def length(self) -> timedelta:
        return timedelta(seconds=self.window_seconds)

    @property
    def window_label(self) -> str:
        return f"{self.limit} req/{self.window_seconds:g}s"


@dataclasses.dataclass
class WindowState:
    """Per-user counter; ``count`` resets once the window has elapsed."""
    count: int
    window_start: datetime


@dataclasses.dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check."""
    decision: RateLimitDecision
    remaining: int
    reset_at: datetime

    @property
    def allowed(self) -> bool:
        return self.decision == RateLimitDecision.ALLOWED

    def retry_after_seconds(self, now: datetime) -> float:
        return max(0.0, (self.reset_at - now).total_seconds())


__all__ = ["RateLimitDecision", "RateLimitResult", "RateWindow", "WindowState"]
