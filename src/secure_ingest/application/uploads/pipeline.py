"""Finalize pipeline: verify, scan, sanitise and promote one upload.

Steps run in a fixed order and each returns a ``Result``.  The first ``Err``
stops the chain; its :class:`FailureReason` decides what happens to the
artifact and is recorded on the session.  Nothing raised inside a step
escapes :meth:`FinalizePipeline.run`.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeAlias, assert_never

from secure_ingest.application.files import (
    ContentSniffer,
    IntegrityVerifier,
    MalwareScanAdapter,
    MetadataStripAdapter,
    StoragePlacer,
)
from secure_ingest.application.quota import QuotaManager
from secure_ingest.application.uploads.chunk_writer import ChunkWriter
from secure_ingest.application.uploads.models import UploadSession, UploadStatus
from secure_ingest.application.uploads.registry import UploadSessionRegistry
from secure_ingest.kernel.errors import (
    FailureReason,
    IncompleteUploadError,
    PipelineError,
    StorageFailureError,
)
from secure_ingest.kernel.types import Err, Ok, Result
from secure_ingest.observability.logging import Logger, get_logger
from secure_ingest.resilience.bulkhead import ConcurrencyLimiter

StepResult: TypeAlias = Result[Any, PipelineError]
Step: TypeAlias = Callable[[UploadSession], Awaitable[StepResult]]


class ArtifactDisposition(Enum):
    DISCARD = "discard"
    QUARANTINE = "quarantine"


def disposition_for(reason: FailureReason) -> ArtifactDisposition:
    """Infected artifacts are evidence and are kept; everything else goes."""
    match reason:
        case FailureReason.MALWARE_DETECTED:
            return ArtifactDisposition.QUARANTINE
        case (
            FailureReason.INCOMPLETE_UPLOAD
            | FailureReason.INTEGRITY_MISMATCH
            | FailureReason.SCAN_TIMEOUT
            | FailureReason.SCAN_FAILED
            | FailureReason.SANITIZATION_FAILURE
            | FailureReason.CONTENT_TYPE_MISMATCH
            | FailureReason.STORAGE_FAILURE
            | FailureReason.STALE
        ):
            return ArtifactDisposition.DISCARD
        case (
            FailureReason.RATE_LIMITED
            | FailureReason.QUOTA_EXCEEDED
            | FailureReason.INVALID_FILE_INFO
            | FailureReason.INVALID_CHUNK
            | FailureReason.UPLOAD_NOT_FOUND
        ):
            raise ValueError(f"{reason} is a rejection, not a pipeline failure")
        case _:
            assert_never(reason)


class FinalizePipeline:
    """Runs once per session, after the registry moved it to ``processing``."""

    def __init__(
        self,
        *,
        registry: UploadSessionRegistry,
        writer: ChunkWriter,
        integrity: IntegrityVerifier,
        scanner: MalwareScanAdapter,
        stripper: MetadataStripAdapter,
        sniffer: ContentSniffer,
        placer: StoragePlacer,
        quota: QuotaManager,
        limiter: ConcurrencyLimiter,
        logger: Logger | None = None,
    ) -> None:
        self._registry = registry
        self._writer = writer
        self._integrity = integrity
        self._scanner = scanner
        self._stripper = stripper
        self._sniffer = sniffer
        self._placer = placer
        self._quota = quota
        self._limiter = limiter
        self._log = logger or get_logger(__name__)

    def _steps(self) -> list[tuple[str, Step]]:
        return [
            ("combine", self._combine),
            ("integrity", self._verify_integrity),
            ("scan", self._scan),
            ("strip", self._strip),
            ("content_type", self._verify_content_type),
            ("store", self._store),
        ]

    async def run(self, session: UploadSession) -> UploadStatus:
        if session.status is not UploadStatus.PROCESSING:
            raise RuntimeError(
                f"upload {session.upload_id} must be claimed before finalize "
                f"(status {session.status.value})"
            )
        log = self._log.bind(upload_id=session.upload_id, user_id=session.user_id)
        keep_temp = False
        async with self._limiter:
            try:
                step, outcome = await self._execute(session)
                match outcome:
                    case Ok(value=storage_path):
                        await self._complete(session, storage_path, log)
                    case Err(error=error):
                        keep_temp = await self._fail(session, step, error, log)
            finally:
                if not keep_temp:
                    await self._cleanup(session, log)
        return session.status

    async def _execute(self, session: UploadSession) -> tuple[str, StepResult]:
        outcome: StepResult = Err(IncompleteUploadError("No pipeline steps ran"))
        for name, step in self._steps():
            try:
                outcome = await step(session)
            except Exception as exc:  # noqa: BLE001
                outcome = Err(self._unexpected(name, exc))
            if outcome.is_err():
                return name, outcome
        return "store", outcome

    def _unexpected(self, step: str, exc: Exception) -> PipelineError:
        if isinstance(exc, OSError) and step == "combine":
            return IncompleteUploadError(f"Artifact unavailable: {exc}", cause=exc)
        if not isinstance(exc, OSError):
            self._log.exception("upload.step_crashed", step=step)
        return StorageFailureError(f"Error during {step}: {exc}", cause=exc)

    # -- steps -------------------------------------------------------------

    async def _combine(self, session: UploadSession) -> StepResult:
        expected = session.plan.count
        if session.chunks_received != expected:
            return Err(IncompleteUploadError(
                f"Received {session.chunks_received} of {expected} chunks",
            ))
        on_disk = await self._writer.size(session.temp_path)
        if on_disk != session.file_info.size:
            return Err(IncompleteUploadError(
                f"Artifact is {on_disk} bytes, declared {session.file_info.size}",
            ))
        return Ok(on_disk)

    async def _verify_integrity(self, session: UploadSession) -> StepResult:
        return await self._integrity.verify(session.temp_path, session.file_info.sha256)

    async def _scan(self, session: UploadSession) -> StepResult:
        return await self._scanner.scan(session.temp_path)

    async def _strip(self, session: UploadSession) -> StepResult:
        outcome = await self._stripper.sanitize(session.temp_path, session.file_info.mime_type)
        if outcome.is_ok():
            session.stored_sha256 = await self._integrity.digest(session.temp_path)
        return outcome

    async def _verify_content_type(self, session: UploadSession) -> StepResult:
        return await self._sniffer.verify(session.temp_path, session.file_info.mime_type)

    async def _store(self, session: UploadSession) -> StepResult:
        return await self._placer.promote(
            session.temp_path, session.upload_id, session.file_info.mime_type,
        )

    # -- outcomes ----------------------------------------------------------

    async def _complete(self, session: UploadSession, storage_path: Path, log: Any) -> None:
        self._registry.mark_complete(session.upload_id, storage_path)
        try:
            await self._quota.commit(session.user_id, session.file_info.size)
        except Exception as exc:  # noqa: BLE001
            log.error("quota.commit_failed", size_bytes=session.file_info.size, error=repr(exc))
        log.info(
            "upload.completed",
            storage_path=str(storage_path),
            size_bytes=session.file_info.size,
            sha256=session.stored_sha256,
        )

    async def _fail(self, session: UploadSession, step: str, error: PipelineError, log: Any) -> bool:
        """Dispose of the artifact and record the failure.

        Returns ``True`` when the temp artifact must be left in place because
        quarantining an infected file failed.
        """
        keep_temp = False
        if disposition_for(error.reason) is ArtifactDisposition.QUARANTINE:
            try:
                session.quarantine_path = await self._placer.quarantine(
                    session.temp_path, session.upload_id, session.file_info.mime_type,
                )
                log.warning("upload.quarantined", path=str(session.quarantine_path))
            except OSError as exc:
                keep_temp = True
                log.error("upload.quarantine_failed", path=str(session.temp_path), error=repr(exc))

        self._registry.mark_failed(session.upload_id, error.reason, error.message)
        log.error(
            "upload.failed",
            step=step,
            reason=error.reason.value,
            error=error.message,
            detail=error.detail,
        )
        return keep_temp

    async def _cleanup(self, session: UploadSession, log: Any) -> None:
        try:
            if not await self._placer.discard(session.temp_path):
                log.warning("upload.cleanup_incomplete", path=str(session.temp_path))
        except Exception as exc:  # noqa: BLE001
            log.warning("upload.cleanup_failed", path=str(session.temp_path), error=repr(exc))


__all__ = ["ArtifactDisposition", "FinalizePipeline", "disposition_for"]
