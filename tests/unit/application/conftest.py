"""Shared fixtures for upload service tests."""
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from secure_ingest.application.uploads import SecureUploader
from secure_ingest.config.settings import UploaderSettings
from secure_ingest.testing import FakeClock, FakeScanner, FakeStripper, InMemoryQuotaStore


@pytest.fixture
def settings(tmp_path: Path) -> UploaderSettings:
    return UploaderSettings(
        temp_dir=str(tmp_path / "temp"),
        quarantine_dir=str(tmp_path / "quarantine"),
        storage_dir=str(tmp_path / "storage"),
        max_file_size=64 * 1024,
        chunk_size=1024,
        quota_per_user=256 * 1024,
        rate_limit_window_seconds=60,
        rate_limit_max_requests=5,
        scan_timeout_seconds=1.0,
        strip_timeout_seconds=1.0,
        staleness_deadline_seconds=3600,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scanner() -> FakeScanner:
    return FakeScanner()


@pytest.fixture
def stripper() -> FakeStripper:
    return FakeStripper()


@pytest.fixture
def quota_store() -> InMemoryQuotaStore:
    return InMemoryQuotaStore()


@pytest.fixture
def make_uploader(
    settings: UploaderSettings,
    scanner: FakeScanner,
    stripper: FakeStripper,
    quota_store: InMemoryQuotaStore,
    clock: FakeClock,
) -> Callable[..., SecureUploader]:
    """Factory; keyword overrides replace the default fakes."""

    def _make(**overrides: object) -> SecureUploader:
        return SecureUploader(
            overrides.get("settings", settings),  # type: ignore[arg-type]
            overrides.get("scanner", scanner),  # type: ignore[arg-type]
            overrides.get("stripper", stripper),  # type: ignore[arg-type]
            overrides.get("quota_store", quota_store),  # type: ignore[arg-type]
            clock=overrides.get("clock", clock),  # type: ignore[arg-type]
        )

    return _make
