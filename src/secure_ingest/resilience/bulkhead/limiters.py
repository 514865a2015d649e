"""Resilience – ConcurrencyLimiter."""
from __future__ import annotations

import asyncio


class ConcurrencyLimiter:
    """Caps how many holders are inside the ``async with`` block at once.

    Callers beyond ``max_concurrent`` wait for a slot instead of failing.
    """

    def __init__(self, max_concurrent: int) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.max_concurrent = max_concurrent
        self._active = 0

    @property
    def active(self) -> int:
        return self._active

    @property
    def available(self) -> int:
        return self.max_concurrent - self._active

    async def __aenter__(self) -> "ConcurrencyLimiter":
        await self._semaphore.acquire()
        self._active += 1
        return self

    async def __aexit__(self, *_: object) -> None:
        self._active -= 1
        self._semaphore.release()


__all__ = ["ConcurrencyLimiter"]
