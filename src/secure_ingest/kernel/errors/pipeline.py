"""Pipeline-class errors – carried in ``Err`` and recorded on the session."""

from __future__ import annotations

from typing import Any, ClassVar

from secure_ingest.kernel.errors.base import BaseError
from secure_ingest.kernel.errors.reasons import FailureReason


class PipelineError(BaseError):
    """A finalize step failed; the session ends in ``failed``."""

    default_code = "pipeline_error"
    reason: ClassVar[FailureReason]


class IncompleteUploadError(PipelineError):
    default_code = "incomplete_upload"
    reason = FailureReason.INCOMPLETE_UPLOAD


class IntegrityMismatchError(PipelineError):
    """Reassembled digest differs from the declared one."""

    default_code = "integrity_mismatch"
    reason = FailureReason.INTEGRITY_MISMATCH

    def __init__(self, expected: str, actual: str, **kwargs: Any) -> None:
        super().__init__(
            f"Digest mismatch: declared {expected}, computed {actual}",
            **kwargs,
        )
        self.expected = expected
        self.actual = actual


class ScanTimeoutError(PipelineError):
    default_code = "scan_timeout"
    reason = FailureReason.SCAN_TIMEOUT


class ScanFailedError(PipelineError):
    """The scan engine errored; treated as a failed scan."""

    default_code = "scan_failed"
    reason = FailureReason.SCAN_FAILED


class MalwareDetectedError(PipelineError):
    default_code = "malware_detected"
    reason = FailureReason.MALWARE_DETECTED

    def __init__(self, threats: list[str], **kwargs: Any) -> None:
        names = ", ".join(threats) or "unknown threat"
        super().__init__(f"Malware detected: {names}", **kwargs)
        self.threats = threats


class SanitizationFailureError(PipelineError):
    default_code = "sanitization_failure"
    reason = FailureReason.SANITIZATION_FAILURE


class ContentTypeMismatchError(PipelineError):
    default_code = "content_type_mismatch"
    reason = FailureReason.CONTENT_TYPE_MISMATCH

    def __init__(self, declared: str, detected: str, **kwargs: Any) -> None:
        super().__init__(
            f"Content type mismatch: declared {declared}, detected {detected}",
            **kwargs,
        )
        self.declared = declared
        self.detected = detected


class StorageFailureError(PipelineError):
    default_code = "storage_failure"
    reason = FailureReason.STORAGE_FAILURE


__all__ = [
    "ContentTypeMismatchError",
    "IncompleteUploadError",
    "IntegrityMismatchError",
    "MalwareDetectedError",
    "PipelineError",
    "SanitizationFailureError",
    "ScanFailedError",
    "ScanTimeoutError",
    "StorageFailureError",
]
