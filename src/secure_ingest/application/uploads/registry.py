"""In-memory table of upload sessions with compare-and-set transitions.

Every method here is synchronous.  Under a single event loop that makes each
test-and-set atomic: no other coroutine can run between the check and the
write, so "enter ``processing``" happens at most once per session.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterator

from secure_ingest.application.uploads.models import (
    ALLOWED_TRANSITIONS,
    ChunkRecord,
    UploadSession,
    UploadStatus,
)
from secure_ingest.kernel.errors import FailureReason, InvalidChunkError, UploadNotFoundError


class UploadSessionRegistry:
    """Owns every live :class:`UploadSession`, keyed by upload id."""

    def __init__(self) -> None:
        self._sessions: dict[str, UploadSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, upload_id: object) -> bool:
        return upload_id in self._sessions

    def __iter__(self) -> Iterator[UploadSession]:
        # snapshot, so callers may remove while iterating
        return iter(list(self._sessions.values()))

    def register(self, session: UploadSession) -> None:
        if session.upload_id in self._sessions:
            raise ValueError(f"upload id {session.upload_id!r} already registered")
        self._sessions[session.upload_id] = session

    def get(self, upload_id: str) -> UploadSession:
        try:
            return self._sessions[upload_id]
        except KeyError:
            raise UploadNotFoundError(upload_id) from None

    def remove(self, upload_id: str) -> UploadSession | None:
        return self._sessions.pop(upload_id, None)

    # -- status ------------------------------------------------------------

    def compare_and_set(
        self,
        upload_id: str,
        expected: UploadStatus,
        new: UploadStatus,
    ) -> bool:
        """Move the session from *expected* to *new*; ``False`` if it was not
        in *expected* or the transition would go backwards."""
        session = self._sessions.get(upload_id)
        if session is None or session.status is not expected:
            return False
        if new not in ALLOWED_TRANSITIONS[expected]:
            return False
        session.status = new
        return True

    def claim_for_finalize(self, upload_id: str) -> bool:
        """Enter ``processing`` if every chunk is on disk and nothing is
        still being written.  Only one caller per session ever gets ``True``."""
        session = self._sessions.get(upload_id)
        if session is None or not session.all_chunks_present or session.writes_in_flight:
            return False
        return self.compare_and_set(upload_id, UploadStatus.PENDING, UploadStatus.PROCESSING)

    def mark_failed(
        self,
        upload_id: str,
        reason: FailureReason,
        message: str,
        *,
        expected: UploadStatus = UploadStatus.PROCESSING,
    ) -> bool:
        if not self.compare_and_set(upload_id, expected, UploadStatus.FAILED):
            return False
        session = self._sessions[upload_id]
        session.failure = reason
        session.failure_message = message
        return True

    def mark_complete(self, upload_id: str, storage_path: Path) -> bool:
        if not self.compare_and_set(upload_id, UploadStatus.PROCESSING, UploadStatus.COMPLETE):
            return False
        self._sessions[upload_id].storage_path = storage_path
        return True

    # -- chunks ------------------------------------------------------------

    def begin_write(self, upload_id: str) -> UploadSession:
        """Reserve a chunk write; refused once the session left ``pending``."""
        session = self.get(upload_id)
        if session.status is not UploadStatus.PENDING:
            raise InvalidChunkError(
                f"Upload is {session.status.value} and no longer accepts chunks",
                detail={"upload_id": upload_id},
            )
        session.writes_in_flight += 1
        return session

    def end_write(self, session: UploadSession, index: int, record: ChunkRecord | None) -> None:
        """Release the reservation; *record* is ``None`` when the write failed."""
        session.writes_in_flight -= 1
        if record is not None and session.status is UploadStatus.PENDING:
            session.chunks[index] = record


__all__ = ["UploadSessionRegistry"]
