"""Config settings – UploaderSettings."""
from __future__ import annotations

import dataclasses
from pathlib import Path

from secure_ingest.application.files.signatures import DEFAULT_SIGNATURES
from secure_ingest.config.settings.base import Settings
from secure_ingest.config.validation import InvalidSettingValueError

_MIB = 1024 * 1024
_GIB = 1024 * _MIB


def _default_allowed_types() -> frozenset[str]:
    return frozenset({"image/jpeg", "image/png", "application/pdf"})


@dataclasses.dataclass
class UploaderSettings(Settings):
    """Recognised options of :class:`~secure_ingest.application.uploads.SecureUploader`.

    Read from ``UPLOADER_*`` environment variables, e.g.
    ``UPLOADER_CHUNK_SIZE=4194304`` or
    ``UPLOADER_ALLOWED_TYPES=image/png,application/pdf``.
    """

    _prefix: dataclasses.ClassVar[str] = "uploader"

    temp_dir: str = "./temp"
    quarantine_dir: str = "./quarantine"
    storage_dir: str = "./storage"
    max_file_size: int = _GIB
    chunk_size: int = 2 * _MIB
    allowed_types: frozenset[str] = dataclasses.field(default_factory=_default_allowed_types)
    quota_per_user: int = 10 * _GIB
    rate_limit_window_seconds: float = 15 * 60
    rate_limit_max_requests: int = 100
    scan_timeout_seconds: float = 30.0
    strip_timeout_seconds: float = 30.0
    max_concurrent_uploads: int = 3
    staleness_deadline_seconds: float = 24 * 60 * 60
    sweep_interval_seconds: float = 15 * 60

    def _validate(self) -> None:
        self.allowed_types = frozenset(self.allowed_types)
        for name in (
            "max_file_size",
            "chunk_size",
            "quota_per_user",
            "rate_limit_max_requests",
            "max_concurrent_uploads",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise InvalidSettingValueError(name, value, "must be a positive integer")
        for name in (
            "rate_limit_window_seconds",
            "scan_timeout_seconds",
            "strip_timeout_seconds",
            "staleness_deadline_seconds",
            "sweep_interval_seconds",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidSettingValueError(name, value, "must be greater than zero")
        if not self.allowed_types:
            raise InvalidSettingValueError("allowed_types", self.allowed_types, "must not be empty")
        unknown = sorted(self.allowed_types - DEFAULT_SIGNATURES.keys())
        if unknown:
            raise InvalidSettingValueError(
                "allowed_types", unknown, "no magic-number signature is known for these types"
            )

    @property
    def temp_path(self) -> Path:
        return Path(self.temp_dir)

    @property
    def quarantine_path(self) -> Path:
        return Path(self.quarantine_dir)

    @property
    def storage_path(self) -> Path:
        return Path(self.storage_dir)


__all__ = ["UploaderSettings"]
