"""Resilience – Deadline and DeadlineExceededError."""
from __future__ import annotations

import dataclasses
import time

from secure_ingest.kernel.errors import BaseError


class DeadlineExceededError(BaseError):
    """An operation did not finish before its deadline."""

    default_code = "deadline_exceeded"


@dataclasses.dataclass(frozen=True)
class Deadline:
    """An absolute deadline on the monotonic clock, derived from a timeout."""
    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=time.monotonic() + seconds)

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def raise_if_expired(self) -> None:
        if self.is_expired:
            raise DeadlineExceededError("Deadline exceeded")


__all__ = ["Deadline", "DeadlineExceededError"]
