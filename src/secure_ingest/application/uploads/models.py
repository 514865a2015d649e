"""Upload session state and the values exchanged with callers."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Final

from secure_ingest.kernel.errors import FailureReason


class UploadStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


# Forward-only state machine; anything not listed here is refused.
ALLOWED_TRANSITIONS: Final[dict[UploadStatus, frozenset[UploadStatus]]] = {
    UploadStatus.PENDING: frozenset({UploadStatus.PROCESSING, UploadStatus.FAILED}),
    UploadStatus.PROCESSING: frozenset({UploadStatus.COMPLETE, UploadStatus.FAILED}),
    UploadStatus.COMPLETE: frozenset(),
    UploadStatus.FAILED: frozenset(),
}


@dataclass(frozen=True)
class FileInfo:
    """Metadata the client declares before sending any bytes."""

    name: str
    size: int
    mime_type: str
    sha256: str


@dataclass(frozen=True)
class ChunkPlan:
    """How a file of ``total_size`` bytes is split into chunks."""

    count: int
    chunk_size: int
    total_size: int

    @classmethod
    def for_size(cls, total_size: int, chunk_size: int) -> "ChunkPlan":
        return cls(
            count=math.ceil(total_size / chunk_size),
            chunk_size=chunk_size,
            total_size=total_size,
        )

    def expected_size(self, index: int) -> int:
        """Exact byte length of chunk *index*; the last one takes the rest."""
        if not 0 <= index < self.count:
            raise IndexError(f"chunk index {index} outside 0..{self.count - 1}")
        if index < self.count - 1:
            return self.chunk_size
        return self.total_size - (self.count - 1) * self.chunk_size

    def offset(self, index: int) -> int:
        return index * self.chunk_size


@dataclass(frozen=True)
class ChunkRecord:
    size: int
    sha256: str
    status: str = "uploaded"


@dataclass
class UploadSession:
    """One in-flight upload.  Mutated only through the registry."""

    upload_id: str
    user_id: str
    file_info: FileInfo
    plan: ChunkPlan
    temp_path: Path
    created_at: datetime
    status: UploadStatus = UploadStatus.PENDING
    chunks: dict[int, ChunkRecord] = field(default_factory=dict)
    writes_in_flight: int = 0
    failure: FailureReason | None = None
    failure_message: str | None = None
    storage_path: Path | None = None
    quarantine_path: Path | None = None
    stored_sha256: str | None = None

    @property
    def chunks_received(self) -> int:
        return len(self.chunks)

    @property
    def bytes_received(self) -> int:
        return sum(record.size for record in self.chunks.values())

    @property
    def all_chunks_present(self) -> bool:
        return len(self.chunks) == self.plan.count

    @property
    def is_terminal(self) -> bool:
        return self.status in (UploadStatus.COMPLETE, UploadStatus.FAILED)

    def age_seconds(self, now: datetime) -> float:
        return (now - self.created_at).total_seconds()


@dataclass(frozen=True)
class UploadTicket:
    """Returned by ``initiate_upload``."""

    upload_id: str
    chunk_plan: ChunkPlan


@dataclass(frozen=True)
class ChunkReceipt:
    """Returned by ``submit_chunk``."""

    chunks_received: int
    is_complete: bool


@dataclass(frozen=True)
class UploadStatusView:
    """Returned by ``get_status``; ``error`` is set only for failed uploads."""

    upload_id: str
    status: UploadStatus
    chunks_received: int
    chunk_count: int
    error: FailureReason | None = None
    message: str | None = None
    storage_path: Path | None = None

    @classmethod
    def of(cls, session: UploadSession) -> "UploadStatusView":
        return cls(
            upload_id=session.upload_id,
            status=session.status,
            chunks_received=session.chunks_received,
            chunk_count=session.plan.count,
            error=session.failure,
            message=session.failure_message,
            storage_path=session.storage_path,
        )


__all__ = [
    "ALLOWED_TRANSITIONS",
    "ChunkPlan",
    "ChunkReceipt",
    "ChunkRecord",
    "FileInfo",
    "UploadSession",
    "UploadStatus",
    "UploadStatusView",
    "UploadTicket",
]
