"""Resilience – run an awaitable against a deadline timer.

The operation and a timer run as sibling tasks.  Whichever finishes first
decides the outcome; the other one is cancelled and awaited so that nothing
it holds (sockets, subprocesses) outlives the call.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from secure_ingest.resilience.timeouts.deadline import Deadline, DeadlineExceededError

T = TypeVar("T")


async def _release(task: asyncio.Task[object]) -> None:
    if task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


async def run_with_deadline(
    operation: Callable[[], Awaitable[T]],
    deadline: Deadline,
    *,
    name: str = "operation",
) -> T:
    """Await ``operation()`` unless *deadline* expires first.

    Raises :class:`DeadlineExceededError` when the timer wins.  Exceptions
    raised by the operation itself propagate unchanged.
    """
    if deadline.is_expired:
        raise DeadlineExceededError(f"{name} deadline already exceeded")

    async def _call() -> T:
        return await operation()

    work: asyncio.Task[T] = asyncio.ensure_future(_call())
    timer: asyncio.Task[None] = asyncio.ensure_future(asyncio.sleep(deadline.remaining_seconds))
    try:
        await asyncio.wait({work, timer}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        await _release(work)
        await _release(timer)
        raise

    if work.done():
        await _release(timer)
        return work.result()

    await _release(work)
    raise DeadlineExceededError(
        f"{name} did not finish before its deadline",
        detail={"operation": name},
    )


__all__ = ["run_with_deadline"]
