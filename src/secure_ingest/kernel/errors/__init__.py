"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── UploadRejectedError       (validation.py)
    │   ├── RateLimitedError
    │   ├── QuotaExceededError
    │   ├── InvalidFileInfoError
    │   ├── InvalidChunkError
    │   └── UploadNotFoundError
    └── PipelineError             (pipeline.py)
        ├── IncompleteUploadError
        ├── IntegrityMismatchError
        ├── ScanTimeoutError
        ├── ScanFailedError
        ├── MalwareDetectedError
        ├── SanitizationFailureError
        ├── ContentTypeMismatchError
        └── StorageFailureError

Every concrete error carries a :class:`FailureReason` tag in ``reason``.
"""

from secure_ingest.kernel.errors.base import BaseError
from secure_ingest.kernel.errors.pipeline import (
    ContentTypeMismatchError,
    IncompleteUploadError,
    IntegrityMismatchError,
    MalwareDetectedError,
    PipelineError,
    SanitizationFailureError,
    ScanFailedError,
    ScanTimeoutError,
    StorageFailureError,
)
from secure_ingest.kernel.errors.reasons import FailureReason
from secure_ingest.kernel.errors.validation import (
    InvalidChunkError,
    InvalidFileInfoError,
    QuotaExceededError,
    RateLimitedError,
    UploadNotFoundError,
    UploadRejectedError,
)

__all__ = [
    "BaseError",
    "ContentTypeMismatchError",
    "FailureReason",
    "IncompleteUploadError",
    "IntegrityMismatchError",
    "InvalidChunkError",
    "InvalidFileInfoError",
    "MalwareDetectedError",
    "PipelineError",
    "QuotaExceededError",
    "RateLimitedError",
    "SanitizationFailureError",
    "ScanFailedError",
    "ScanTimeoutError",
    "StorageFailureError",
    "UploadNotFoundError",
    "UploadRejectedError",
]
