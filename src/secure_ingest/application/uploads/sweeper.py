"""Periodic reclamation of abandoned sessions and idle rate-limit windows."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from secure_ingest.application.files import StoragePlacer
from secure_ingest.application.rate_limit import FixedWindowRateLimiter
from secure_ingest.application.uploads.models import UploadStatus
from secure_ingest.application.uploads.registry import UploadSessionRegistry
from secure_ingest.kernel.errors import FailureReason
from secure_ingest.kernel.time import Clock
from secure_ingest.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SweepReport:
    reclaimed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    expired_terminal: list[str] = field(default_factory=list)
    purged_rate_windows: int = 0


class MaintenanceSweeper:
    """Reclaims sessions older than the staleness deadline.

    A ``pending`` session is failed through the same compare-and-set the
    finalize trigger uses, so a sweep and a late final chunk can never both
    win.  ``processing`` sessions, and pending ones with a chunk write still
    running, are left for a later cycle.
    """

    def __init__(
        self,
        registry: UploadSessionRegistry,
        rate_limiter: FixedWindowRateLimiter,
        placer: StoragePlacer,
        clock: Clock,
        *,
        staleness_deadline_seconds: float,
        interval_seconds: float,
    ) -> None:
        self._registry = registry
        self._rate_limiter = rate_limiter
        self._placer = placer
        self._clock = clock
        self.staleness_deadline_seconds = staleness_deadline_seconds
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> SweepReport:
        report = SweepReport()
        now = self._clock.now()

        for session in self._registry:
            if session.age_seconds(now) <= self.staleness_deadline_seconds:
                continue

            if session.status is UploadStatus.PROCESSING or session.writes_in_flight:
                report.skipped.append(session.upload_id)
                continue

            if session.status is UploadStatus.PENDING:
                if not self._registry.mark_failed(
                    session.upload_id,
                    FailureReason.STALE,
                    "Upload abandoned before all chunks arrived",
                    expected=UploadStatus.PENDING,
                ):
                    report.skipped.append(session.upload_id)
                    continue
                await self._placer.discard(session.temp_path)
                self._registry.remove(session.upload_id)
                report.reclaimed.append(session.upload_id)
                logger.info(
                    "sweep.reclaimed",
                    upload_id=session.upload_id,
                    user_id=session.user_id,
                    chunks_received=session.chunks_received,
                )
                continue

            # terminal: complete or failed
            if session.failure is not FailureReason.MALWARE_DETECTED:
                await self._placer.discard(session.temp_path)
            self._registry.remove(session.upload_id)
            report.expired_terminal.append(session.upload_id)

        report.purged_rate_windows = self._rate_limiter.purge_expired()
        logger.info(
            "sweep.completed",
            reclaimed=len(report.reclaimed),
            skipped=len(report.skipped),
            expired_terminal=len(report.expired_terminal),
            purged_rate_windows=report.purged_rate_windows,
        )
        return report

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def __aenter__(self) -> "MaintenanceSweeper":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as exc:  # noqa: BLE001
                logger.error("sweep.failed", error=repr(exc))


__all__ = ["MaintenanceSweeper", "SweepReport"]
