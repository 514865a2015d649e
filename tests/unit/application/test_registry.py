"""Unit tests for upload sessions, chunk plans and the session registry."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from secure_ingest.application.uploads import (
    ChunkPlan,
    ChunkRecord,
    FileInfo,
    UploadSession,
    UploadSessionRegistry,
    UploadStatus,
)
from secure_ingest.kernel.errors import FailureReason, InvalidChunkError, UploadNotFoundError


def _session(upload_id: str = "u1", size: int = 3000, chunk_size: int = 1024) -> UploadSession:
    return UploadSession(
        upload_id=upload_id,
        user_id="alice",
        file_info=FileInfo(name="a.jpg", size=size, mime_type="image/jpeg", sha256="0" * 64),
        plan=ChunkPlan.for_size(size, chunk_size),
        temp_path=Path("/tmp") / f"{upload_id}.part",
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


def _fill(registry: UploadSessionRegistry, session: UploadSession) -> None:
    for index in range(session.plan.count):
        registry.begin_write(session.upload_id)
        registry.end_write(session, index, ChunkRecord(size=session.plan.expected_size(index), sha256="x"))


# ---------------------------------------------------------------------------
# ChunkPlan
# ---------------------------------------------------------------------------


class TestChunkPlan:
    def test_ten_mebibytes_in_two_mebibyte_chunks(self) -> None:
        plan = ChunkPlan.for_size(10_485_760, 2_097_152)
        assert plan.count == 5
        assert [plan.expected_size(i) for i in range(5)] == [2_097_152] * 5

    def test_last_chunk_takes_remainder(self) -> None:
        plan = ChunkPlan.for_size(3000, 1024)
        assert plan.count == 3
        assert plan.expected_size(2) == 952
        assert plan.offset(2) == 2048

    def test_single_chunk(self) -> None:
        plan = ChunkPlan.for_size(1, 1024)
        assert plan.count == 1
        assert plan.expected_size(0) == 1

    @pytest.mark.parametrize("index", [-1, 3])
    def test_out_of_range(self, index: int) -> None:
        with pytest.raises(IndexError):
            ChunkPlan.for_size(3000, 1024).expected_size(index)


# ---------------------------------------------------------------------------
# UploadSession
# ---------------------------------------------------------------------------


class TestUploadSession:
    def test_defaults(self) -> None:
        session = _session()
        assert session.status is UploadStatus.PENDING
        assert session.chunks_received == 0
        assert session.all_chunks_present is False
        assert session.is_terminal is False

    def test_age_seconds(self) -> None:
        session = _session()
        assert session.age_seconds(datetime(2026, 1, 1, 0, 1, tzinfo=UTC)) == 60.0


# ---------------------------------------------------------------------------
# UploadSessionRegistry
# ---------------------------------------------------------------------------


class TestRegistryLookup:
    def test_register_and_get(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        assert registry.get("u1") is session
        assert "u1" in registry
        assert len(registry) == 1

    def test_duplicate_id_refused(self) -> None:
        registry = UploadSessionRegistry()
        registry.register(_session())
        with pytest.raises(ValueError):
            registry.register(_session())

    def test_get_unknown(self) -> None:
        with pytest.raises(UploadNotFoundError) as exc_info:
            UploadSessionRegistry().get("nope")
        assert exc_info.value.reason is FailureReason.UPLOAD_NOT_FOUND

    def test_iteration_tolerates_removal(self) -> None:
        registry = UploadSessionRegistry()
        for upload_id in ("a", "b", "c"):
            registry.register(_session(upload_id))
        for session in registry:
            registry.remove(session.upload_id)
        assert len(registry) == 0


class TestCompareAndSet:
    def test_forward_transition(self) -> None:
        registry = UploadSessionRegistry()
        registry.register(_session())
        assert registry.compare_and_set("u1", UploadStatus.PENDING, UploadStatus.PROCESSING)
        assert registry.get("u1").status is UploadStatus.PROCESSING

    def test_wrong_expected_status(self) -> None:
        registry = UploadSessionRegistry()
        registry.register(_session())
        assert not registry.compare_and_set("u1", UploadStatus.PROCESSING, UploadStatus.COMPLETE)
        assert registry.get("u1").status is UploadStatus.PENDING

    def test_backward_transition_refused(self) -> None:
        registry = UploadSessionRegistry()
        registry.register(_session())
        registry.compare_and_set("u1", UploadStatus.PENDING, UploadStatus.FAILED)
        assert not registry.compare_and_set("u1", UploadStatus.FAILED, UploadStatus.PENDING)

    def test_pending_cannot_skip_to_complete(self) -> None:
        registry = UploadSessionRegistry()
        registry.register(_session())
        assert not registry.compare_and_set("u1", UploadStatus.PENDING, UploadStatus.COMPLETE)

    def test_unknown_session(self) -> None:
        assert not UploadSessionRegistry().compare_and_set("x", UploadStatus.PENDING, UploadStatus.FAILED)


class TestClaimForFinalize:
    def test_requires_every_chunk(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        registry.begin_write("u1")
        registry.end_write(session, 0, ChunkRecord(size=1024, sha256="x"))
        assert registry.claim_for_finalize("u1") is False

    def test_waits_for_writes_in_flight(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        _fill(registry, session)
        registry.begin_write("u1")
        assert registry.claim_for_finalize("u1") is False
        registry.end_write(session, 0, ChunkRecord(size=1024, sha256="x"))
        assert registry.claim_for_finalize("u1") is True

    def test_only_first_claim_wins(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        _fill(registry, session)
        claims = [registry.claim_for_finalize("u1") for _ in range(5)]
        assert claims == [True, False, False, False, False]
        assert session.status is UploadStatus.PROCESSING

    def test_failed_write_releases_without_record(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        registry.begin_write("u1")
        registry.end_write(session, 0, None)
        assert session.writes_in_flight == 0
        assert session.chunks == {}


class TestTerminalMarks:
    def test_mark_complete_records_path(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        _fill(registry, session)
        registry.claim_for_finalize("u1")
        assert registry.mark_complete("u1", Path("/store/u1.jpg"))
        assert session.status is UploadStatus.COMPLETE
        assert session.storage_path == Path("/store/u1.jpg")
        assert session.is_terminal

    def test_mark_failed_records_reason(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        assert registry.mark_failed("u1", FailureReason.STALE, "abandoned", expected=UploadStatus.PENDING)
        assert session.failure is FailureReason.STALE
        assert session.failure_message == "abandoned"

    def test_mark_failed_requires_processing_by_default(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        assert not registry.mark_failed("u1", FailureReason.SCAN_FAILED, "boom")
        assert session.failure is None

    def test_chunks_refused_after_claim(self) -> None:
        registry = UploadSessionRegistry()
        session = _session()
        registry.register(session)
        _fill(registry, session)
        registry.claim_for_finalize("u1")
        with pytest.raises(InvalidChunkError):
            registry.begin_write("u1")

    def test_late_record_ignored_after_failure(self) -> None:
        registry = UploadSessionRegistry()
        session = _session(size=1024)
        registry.register(session)
        registry.begin_write("u1")
        session.status = UploadStatus.FAILED
        registry.end_write(session, 0, ChunkRecord(size=1024, sha256="x"))
        assert session.chunks == {}
