"""Application quota – QuotaStore port."""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class QuotaStore(Protocol):
    """Port: persistence layer that owns cumulative per-user usage."""

    async def get_user_quota(self, user_id: str) -> int:
        """Return the bytes already consumed by *user_id* (0 when unknown)."""
        ...

    async def increment_user_quota(self, user_id: str, size_bytes: int) -> None: ...


__all__ = ["QuotaStore"]
