"""Application rate limiting – in-memory fixed-window implementation."""

from __future__ import annotations

from secure_ingest.application.rate_limit.rate_limiter import (
    RateLimitDecision,
    RateLimitResult,
    RateWindow,
    WindowState,
)
from secure_ingest.kernel.errors import RateLimitedError
from secure_ingest.kernel.time import Clock, SystemClock
from secure_ingest.observability.logging import get_logger

logger = get_logger(__name__)


class FixedWindowRateLimiter:
    """Single-process fixed-window counter per user.

    The window resets once *more than* ``window.window_seconds`` have elapsed
    since it opened.  Denied attempts do not consume the window.  Bursts of up
    to twice the limit are possible across a window edge.
    """

    def __init__(self, window: RateWindow, clock: Clock | None = None) -> None:
        self.window = window
        self._clock = clock or SystemClock()
        self._states: dict[str, WindowState] = {}

    def __len__(self) -> int:
        return len(self._states)

    async def check(self, user_id: str) -> RateLimitResult:
        now = self._clock.now()
        state = self._states.get(user_id)
        if state is None:
            state = WindowState(count=0, window_start=now)
            self._states[user_id] = state

        if now - state.window_start > self.window.length:
            state.count = 0
            state.window_start = now

        reset_at = state.window_start + self.window.length

        if state.count >= self.window.limit:
            return RateLimitResult(
                decision=RateLimitDecision.DENIED,
                remaining=0,
                reset_at=reset_at,
            )

        state.count += 1
        return RateLimitResult(
            decision=RateLimitDecision.ALLOWED,
            remaining=self.window.limit - state.count,
            reset_at=reset_at,
        )

    async def acquire(self, user_id: str) -> RateLimitResult:
        """Like :meth:`check` but raises :class:`RateLimitedError` on denial."""
        result = await self.check(user_id)
        if not result.allowed:
            retry_after = result.retry_after_seconds(self._clock.now())
            logger.warning(
                "rate_limit.denied",
                user_id=user_id,
                limit=self.window.window_label,
                retry_after_seconds=retry_after,
            )
            raise RateLimitedError(
                f"Rate limit of {self.window.window_label} exceeded",
                retry_after_seconds=retry_after,
                detail={"user_id": user_id},
            )
        return result

    async def reset(self, user_id: str) -> None:
        self._states.pop(user_id, None)

    def purge_expired(self) -> int:
        """Drop windows that have elapsed; returns how many were removed."""
        now = self._clock.now()
        expired = [
            user_id
            for user_id, state in self._states.items()
            if now - state.window_start > self.window.length
        ]
        for user_id in expired:
            del self._states[user_id]
        return len(expired)


__all__ = ["FixedWindowRateLimiter"]
