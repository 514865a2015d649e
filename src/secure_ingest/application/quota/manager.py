"""Business logic for storage quota accounting."""

from __future__ import annotations

from secure_ingest.application.quota.store import QuotaStore
from secure_ingest.kernel.errors import QuotaExceededError
from secure_ingest.observability.logging import get_logger

logger = get_logger(__name__)


class QuotaManager:
    """Checks projected usage before an upload and charges it afterwards.

    ``check_projected`` runs before any bytes are accepted; ``commit`` runs
    only once a session has reached ``complete``.  Rejected or quarantined
    uploads are therefore never charged.
    """

    def __init__(self, store: QuotaStore, quota_per_user: int) -> None:
        self._store = store
        self.quota_per_user = quota_per_user

    async def used_bytes(self, user_id: str) -> int:
        return await self._store.get_user_quota(user_id)

    async def check_projected(self, user_id: str, size_bytes: int) -> None:
        """Check if user has enough quota for an upload.

        Raises:
            QuotaExceededError: If ``used + size_bytes`` exceeds the cap.
        """
        used = await self._store.get_user_quota(user_id)
        if used + size_bytes > self.quota_per_user:
            logger.warning(
                "quota.exceeded",
                user_id=user_id,
                required_bytes=size_bytes,
                available_bytes=max(0, self.quota_per_user - used),
            )
            raise QuotaExceededError(
                quota_bytes=self.quota_per_user,
                used_bytes=used,
                required_bytes=size_bytes,
                detail={"user_id": user_id},
            )

    async def commit(self, user_id: str, size_bytes: int) -> None:
        """Charge *size_bytes* to the user's usage."""
        await self._store.increment_user_quota(user_id, size_bytes)
        logger.debug("quota.committed", user_id=user_id, size_bytes=size_bytes)


__all__ = ["QuotaManager"]
