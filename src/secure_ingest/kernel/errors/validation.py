"""Validation-class errors – raised to the caller, never recorded on a session."""

from __future__ import annotations

from typing import Any, ClassVar

from secure_ingest.kernel.errors.base import BaseError
from secure_ingest.kernel.errors.reasons import FailureReason


class UploadRejectedError(BaseError):
    """A caller-facing operation was refused before any state changed."""

    default_code = "upload_rejected"
    reason: ClassVar[FailureReason]


class RateLimitedError(UploadRejectedError):
    """Too many uploads initiated inside the current window."""

    default_code = "rate_limited"
    reason = FailureReason.RATE_LIMITED

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after_seconds = retry_after_seconds


class QuotaExceededError(UploadRejectedError):
    """Raised when an upload would exceed the user's storage quota."""

    default_code = "quota_exceeded"
    reason = FailureReason.QUOTA_EXCEEDED

    def __init__(
        self,
        quota_bytes: int,
        used_bytes: int,
        required_bytes: int,
        **kwargs: Any,
    ) -> None:
        self.quota_bytes = quota_bytes
        self.used_bytes = used_bytes
        self.required_bytes = required_bytes

        available = max(0, quota_bytes - used_bytes)
        super().__init__(
            f"Quota exceeded: need {required_bytes} bytes, "
            f"only {available} bytes available "
            f"(quota: {quota_bytes}, used: {used_bytes})",
            **kwargs,
        )


class InvalidFileInfoError(UploadRejectedError):
    """Declared file metadata is malformed or not allowed.

    ``errors`` lists every field-level problem found, not just the first.
    """

    default_code = "invalid_file_info"
    reason = FailureReason.INVALID_FILE_INFO

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[str] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidChunkError(UploadRejectedError):
    """Chunk index or length does not fit the chunk plan."""

    default_code = "invalid_chunk"
    reason = FailureReason.INVALID_CHUNK


class UploadNotFoundError(UploadRejectedError):
    """No session is registered under the given upload id."""

    default_code = "upload_not_found"
    reason = FailureReason.UPLOAD_NOT_FOUND

    def __init__(self, upload_id: str, **kwargs: Any) -> None:
        super().__init__(f"Upload '{upload_id}' not found", **kwargs)
        self.upload_id = upload_id


__all__ = [
    "InvalidChunkError",
    "InvalidFileInfoError",
    "QuotaExceededError",
    "RateLimitedError",
    "UploadNotFoundError",
    "UploadRejectedError",
]
