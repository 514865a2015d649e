"""Closed set of failure tags shared by rejections and pipeline failures."""

from __future__ import annotations

from enum import StrEnum


class FailureReason(StrEnum):
    # raised synchronously, no session state is created
    RATE_LIMITED = "RateLimited"
    QUOTA_EXCEEDED = "QuotaExceeded"
    INVALID_FILE_INFO = "InvalidFileInfo"
    INVALID_CHUNK = "InvalidChunk"
    UPLOAD_NOT_FOUND = "UploadNotFound"

    # recorded on the session as a terminal ``failed`` status
    INCOMPLETE_UPLOAD = "IncompleteUpload"
    INTEGRITY_MISMATCH = "IntegrityMismatch"
    SCAN_TIMEOUT = "ScanTimeout"
    SCAN_FAILED = "ScanFailed"
    MALWARE_DETECTED = "MalwareDetected"
    SANITIZATION_FAILURE = "SanitizationFailure"
    CONTENT_TYPE_MISMATCH = "ContentTypeMismatch"
    STORAGE_FAILURE = "StorageFailure"

    # set by the maintenance sweep on abandoned sessions
    STALE = "Stale"


__all__ = ["FailureReason"]
