"""Application uploads – sessions, chunk intake, finalize pipeline, sweeps."""
from secure_ingest.application.uploads.chunk_writer import ChunkWriter
from secure_ingest.application.uploads.models import (
    ChunkPlan,
    ChunkReceipt,
    ChunkRecord,
    FileInfo,
    UploadSession,
    UploadStatus,
    UploadStatusView,
    UploadTicket,
)
from secure_ingest.application.uploads.pipeline import (
    ArtifactDisposition,
    FinalizePipeline,
    disposition_for,
)
from secure_ingest.application.uploads.registry import UploadSessionRegistry
from secure_ingest.application.uploads.service import SecureUploader
from secure_ingest.application.uploads.sweeper import MaintenanceSweeper, SweepReport
from secure_ingest.application.uploads.validation import file_info_errors, validate_file_info

__all__ = [
    "ArtifactDisposition",
    "ChunkPlan",
    "ChunkReceipt",
    "ChunkRecord",
    "ChunkWriter",
    "FileInfo",
    "FinalizePipeline",
    "MaintenanceSweeper",
    "SecureUploader",
    "SweepReport",
    "UploadSession",
    "UploadSessionRegistry",
    "UploadStatus",
    "UploadStatusView",
    "UploadTicket",
    "disposition_for",
    "file_info_errors",
    "validate_file_info",
]
