"""SecureUploader – the caller-facing upload service."""
from __future__ import annotations

import uuid
from typing import Any

from secure_ingest.application.files import (
    ContentSniffer,
    IntegrityVerifier,
    MalwareScanAdapter,
    MalwareScanner,
    MetadataStripAdapter,
    MetadataStripper,
    StoragePlacer,
    ensure_directories,
    sha256_bytes,
)
from secure_ingest.application.quota import QuotaManager, QuotaStore
from secure_ingest.application.rate_limit import FixedWindowRateLimiter, RateWindow
from secure_ingest.application.uploads.chunk_writer import ChunkWriter
from secure_ingest.application.uploads.models import (
    ChunkPlan,
    ChunkReceipt,
    ChunkRecord,
    FileInfo,
    UploadSession,
    UploadStatusView,
    UploadTicket,
)
from secure_ingest.application.uploads.pipeline import FinalizePipeline
from secure_ingest.application.uploads.registry import UploadSessionRegistry
from secure_ingest.application.uploads.sweeper import MaintenanceSweeper, SweepReport
from secure_ingest.application.uploads.validation import validate_file_info
from secure_ingest.config.settings import UploaderSettings
from secure_ingest.kernel.errors import InvalidChunkError, StorageFailureError
from secure_ingest.kernel.time import Clock, SystemClock
from secure_ingest.observability.logging import Logger, get_logger
from secure_ingest.resilience.bulkhead import ConcurrencyLimiter


class SecureUploader:
    """Accepts files in chunks and runs each completed upload through the
    finalize pipeline exactly once.

    Usage::

        async with SecureUploader(settings, scanner, stripper, quota_store) as uploader:
            ticket = await uploader.initiate_upload("user-1", file_info)
            for index, chunk in enumerate(chunks):
                receipt = await uploader.submit_chunk(ticket.upload_id, index, chunk)
            view = await uploader.get_status(ticket.upload_id)
    """

    def __init__(
        self,
        settings: UploaderSettings,
        scanner: MalwareScanner,
        stripper: MetadataStripper,
        quota_store: QuotaStore,
        *,
        clock: Clock | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.settings = settings
        self._clock = clock or SystemClock()
        self._log = logger or get_logger(__name__)

        self.registry = UploadSessionRegistry()
        self.rate_limiter = FixedWindowRateLimiter(
            RateWindow(
                limit=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
            ),
            clock=self._clock,
        )
        self.quota = QuotaManager(quota_store, settings.quota_per_user)
        self._writer = ChunkWriter()
        self._placer = StoragePlacer(settings.storage_path, settings.quarantine_path, self._clock)
        sniffer = ContentSniffer(settings.allowed_types)

        self._pipeline = FinalizePipeline(
            registry=self.registry,
            writer=self._writer,
            integrity=IntegrityVerifier(),
            scanner=MalwareScanAdapter(scanner, settings.scan_timeout_seconds),
            stripper=MetadataStripAdapter(stripper, sniffer, settings.strip_timeout_seconds),
            sniffer=sniffer,
            placer=self._placer,
            quota=self.quota,
            limiter=ConcurrencyLimiter(settings.max_concurrent_uploads),
            logger=self._log,
        )
        self.sweeper = MaintenanceSweeper(
            self.registry,
            self.rate_limiter,
            self._placer,
            self._clock,
            staleness_deadline_seconds=settings.staleness_deadline_seconds,
            interval_seconds=settings.sweep_interval_seconds,
        )

    async def start(self) -> None:
        await ensure_directories(
            self.settings.temp_path,
            self.settings.quarantine_path,
            self.settings.storage_path,
        )
        await self.sweeper.start()
        self._log.info("uploader.started", temp_dir=self.settings.temp_dir)

    async def stop(self) -> None:
        await self.sweeper.stop()
        self._log.info("uploader.stopped", in_flight=len(self.registry))

    async def __aenter__(self) -> "SecureUploader":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def initiate_upload(self, user_id: str, file_info: FileInfo) -> UploadTicket:
        """Open a ``pending`` session.

        Raises:
            RateLimitedError: Too many uploads started in the current window.
            QuotaExceededError: The declared size would exceed the user's quota.
            InvalidFileInfoError: Name, size, type or digest are unacceptable.
            StorageFailureError: The temporary artifact could not be created.
        """
        await self.rate_limiter.acquire(user_id)
        size = file_info.size
        if isinstance(size, int) and not isinstance(size, bool):
            await self.quota.check_projected(user_id, size)
        validate_file_info(
            file_info,
            max_file_size=self.settings.max_file_size,
            allowed_types=self.settings.allowed_types,
        )

        upload_id = str(uuid.uuid4())
        plan = ChunkPlan.for_size(file_info.size, self.settings.chunk_size)
        session = UploadSession(
            upload_id=upload_id,
            user_id=user_id,
            file_info=file_info,
            plan=plan,
            temp_path=self.settings.temp_path / f"{upload_id}.part",
            created_at=self._clock.now(),
        )
        try:
            await self._writer.create(session.temp_path)
        except OSError as exc:
            raise StorageFailureError(
                "Could not create the temporary artifact",
                detail={"upload_id": upload_id, "temp_dir": self.settings.temp_dir},
                cause=exc,
            ) from exc
        self.registry.register(session)

        self._log.info(
            "upload.initiated",
            upload_id=upload_id,
            user_id=user_id,
            size_bytes=file_info.size,
            mime_type=file_info.mime_type,
            chunk_count=plan.count,
        )
        return UploadTicket(upload_id=upload_id, chunk_plan=plan)

    async def submit_chunk(self, upload_id: str, index: int, data: bytes) -> ChunkReceipt:
        """Write one chunk; runs the finalize pipeline if it was the last one.

        Raises:
            UploadNotFoundError: No such session.
            InvalidChunkError: Bad index or length, or the session no longer
                accepts chunks.
        """
        session = self.registry.get(upload_id)
        plan = session.plan
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < plan.count:
            raise InvalidChunkError(
                f"Chunk index {index!r} outside 0..{plan.count - 1}",
                detail={"upload_id": upload_id},
            )
        expected = plan.expected_size(index)
        if len(data) != expected:
            raise InvalidChunkError(
                f"Chunk {index} must be {expected} bytes, got {len(data)}",
                detail={"upload_id": upload_id, "index": index},
            )

        session = self.registry.begin_write(upload_id)
        record: ChunkRecord | None = None
        failure: OSError | None = None
        try:
            await self._writer.write(session.temp_path, plan.offset(index), data)
            record = ChunkRecord(size=len(data), sha256=sha256_bytes(data))
        except OSError as exc:
            failure = exc
        finally:
            self.registry.end_write(session, index, record)

        # An overlapping write of the same index may have held off the claim of
        # the write that completed the session; whoever ends last retries it.
        is_complete = session.all_chunks_present
        if is_complete:
            await self.finalize(upload_id)
        if failure is not None:
            raise InvalidChunkError(
                f"Chunk {index} could not be written",
                detail={"upload_id": upload_id, "index": index},
                cause=failure,
            ) from failure

        self._log.debug("upload.chunk_received", upload_id=upload_id, index=index, size_bytes=len(data))
        return ChunkReceipt(chunks_received=session.chunks_received, is_complete=is_complete)

    async def finalize(self, upload_id: str) -> bool:
        """Run the pipeline if this call wins the claim; ``False`` otherwise."""
        if not self.registry.claim_for_finalize(upload_id):
            return False
        session = self.registry.get(upload_id)
        self._log.info("upload.finalizing", upload_id=upload_id, user_id=session.user_id)
        await self._pipeline.run(session)
        return True

    async def get_status(self, upload_id: str) -> UploadStatusView:
        """Raises :class:`UploadNotFoundError` for unknown or reclaimed ids."""
        return UploadStatusView.of(self.registry.get(upload_id))

    async def sweep(self) -> SweepReport:
        """Run one maintenance cycle now."""
        return await self.sweeper.run_once()


__all__ = ["SecureUploader"]
