"""Unit tests for application.files – sniffing, integrity, scan, strip, placement."""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

import pytest

from secure_ingest.application.files import (
    OCTET_STREAM,
    ContentSniffer,
    IntegrityVerifier,
    MalwareScanAdapter,
    MalwareScanner,
    MetadataStripAdapter,
    MetadataStripper,
    StoragePlacer,
    artifact_name,
    sha256_file,
)
from secure_ingest.kernel.errors import (
    ContentTypeMismatchError,
    FailureReason,
    IntegrityMismatchError,
    MalwareDetectedError,
    ScanFailedError,
    ScanTimeoutError,
)
from secure_ingest.testing import FakeClock, FakeScanner, FakeStripper
from secure_ingest.testing.samples import jpeg_bytes, pdf_bytes, png_bytes

_ALLOWED = frozenset({"image/jpeg", "image/png", "application/pdf"})


def _write(tmp_path: Path, data: bytes, name: str = "artifact.part") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


# ---------------------------------------------------------------------------
# ContentSniffer
# ---------------------------------------------------------------------------


class TestContentSniffer:
    @pytest.mark.parametrize(
        "data,expected",
        [
            (jpeg_bytes(64), "image/jpeg"),
            (png_bytes(64), "image/png"),
            (pdf_bytes(64), "application/pdf"),
            (b"GIF89a" + b"\0" * 10, "image/gif"),
            (b"<html></html>", OCTET_STREAM),
            (b"", OCTET_STREAM),
        ],
    )
    def test_sniff(self, data: bytes, expected: str) -> None:
        assert ContentSniffer(_ALLOWED).sniff(data) == expected

    def test_verify_matching_type(self, tmp_path: Path) -> None:
        path = _write(tmp_path, png_bytes(500))
        result = asyncio.run(ContentSniffer(_ALLOWED).verify(path, "image/png"))
        assert result.is_ok()
        assert result.unwrap() == "image/png"

    def test_verify_ignores_declared_type(self, tmp_path: Path) -> None:
        path = _write(tmp_path, pdf_bytes(500))
        result = asyncio.run(ContentSniffer(_ALLOWED).verify(path, "image/jpeg"))
        assert result.is_err()
        assert isinstance(result.error, ContentTypeMismatchError)
        assert result.error.reason is FailureReason.CONTENT_TYPE_MISMATCH

    def test_verify_rejects_detected_type_outside_allow_list(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"GIF89a" + b"\0" * 10 + b"\x3b")
        result = asyncio.run(ContentSniffer(_ALLOWED).verify(path, "image/gif"))
        assert result.is_err()

    @pytest.mark.parametrize(
        "data,mime_type,intact",
        [
            (jpeg_bytes(300), "image/jpeg", True),
            (jpeg_bytes(300)[:-2], "image/jpeg", False),
            (png_bytes(300), "image/png", True),
            (png_bytes(300)[:-20], "image/png", False),
            (pdf_bytes(300), "application/pdf", True),
            (pdf_bytes(300)[:-8], "application/pdf", False),
            (pdf_bytes(300), "image/jpeg", False),
            (jpeg_bytes(300), "text/plain", False),
        ],
    )
    def test_is_intact(self, tmp_path: Path, data: bytes, mime_type: str, intact: bool) -> None:
        path = _write(tmp_path, data)
        assert asyncio.run(ContentSniffer(_ALLOWED).is_intact(path, mime_type)) is intact

    def test_is_intact_missing_file(self, tmp_path: Path) -> None:
        sniffer = ContentSniffer(_ALLOWED)
        assert asyncio.run(sniffer.is_intact(tmp_path / "gone", "image/jpeg")) is False


# ---------------------------------------------------------------------------
# IntegrityVerifier
# ---------------------------------------------------------------------------


class TestIntegrityVerifier:
    def test_sha256_file_reads_in_blocks(self, tmp_path: Path) -> None:
        data = bytes(range(256)) * 1000
        path = _write(tmp_path, data)
        assert sha256_file(path) == hashlib.sha256(data).hexdigest()

    def test_verify_match_is_case_insensitive(self, tmp_path: Path) -> None:
        data = b"payload"
        path = _write(tmp_path, data)
        expected = hashlib.sha256(data).hexdigest().upper()
        assert asyncio.run(IntegrityVerifier().verify(path, expected)).is_ok()

    def test_verify_mismatch(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"payload")
        result = asyncio.run(IntegrityVerifier().verify(path, "0" * 64))
        assert isinstance(result.error, IntegrityMismatchError)
        assert result.error.actual == hashlib.sha256(b"payload").hexdigest()


# ---------------------------------------------------------------------------
# MalwareScanAdapter
# ---------------------------------------------------------------------------


class TestMalwareScanAdapter:
    def test_fake_satisfies_port(self) -> None:
        assert isinstance(FakeScanner(), MalwareScanner)

    def test_clean_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"clean")
        result = asyncio.run(MalwareScanAdapter(FakeScanner(), 1.0).scan(path))
        assert result.is_ok()
        assert result.unwrap().is_infected is False

    def test_infected_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"evil")
        result = asyncio.run(MalwareScanAdapter(FakeScanner(threats=["Eicar"]), 1.0).scan(path))
        assert isinstance(result.error, MalwareDetectedError)
        assert result.error.threats == ["Eicar"]

    def test_timeout_cancels_engine(self, tmp_path: Path) -> None:
        engine = FakeScanner(delay_seconds=5.0)
        result = asyncio.run(MalwareScanAdapter(engine, 0.05).scan(_write(tmp_path, b"x")))
        assert isinstance(result.error, ScanTimeoutError)
        assert engine.cancelled == 1

    def test_engine_error_fails_closed(self, tmp_path: Path) -> None:
        engine = FakeScanner(error=OSError("socket closed"))
        result = asyncio.run(MalwareScanAdapter(engine, 1.0).scan(_write(tmp_path, b"x")))
        assert isinstance(result.error, ScanFailedError)


# ---------------------------------------------------------------------------
# MetadataStripAdapter
# ---------------------------------------------------------------------------


class TestMetadataStripAdapter:
    def _adapter(self, stripper: FakeStripper, timeout: float = 1.0) -> MetadataStripAdapter:
        return MetadataStripAdapter(stripper, ContentSniffer(_ALLOWED), timeout)

    def test_fake_satisfies_port(self) -> None:
        assert isinstance(FakeStripper(), MetadataStripper)

    def test_untouched_file_passes(self, tmp_path: Path) -> None:
        stripper = FakeStripper()
        path = _write(tmp_path, jpeg_bytes(200))
        assert asyncio.run(self._adapter(stripper).sanitize(path, "image/jpeg")).is_ok()
        assert stripper.calls == [path]

    def test_tool_breaking_file_fails(self, tmp_path: Path) -> None:
        path = _write(tmp_path, png_bytes(200))
        stripper = FakeStripper(rewrite=lambda raw: raw[:100])
        result = asyncio.run(self._adapter(stripper).sanitize(path, "image/png"))
        assert result.is_err()
        assert result.error.reason is FailureReason.SANITIZATION_FAILURE

    def test_tool_timeout_is_tolerated(self, tmp_path: Path) -> None:
        path = _write(tmp_path, jpeg_bytes(200))
        adapter = self._adapter(FakeStripper(delay_seconds=5.0), timeout=0.05)
        assert asyncio.run(adapter.sanitize(path, "image/jpeg")).is_ok()

    def test_tool_error_is_tolerated(self, tmp_path: Path) -> None:
        path = _write(tmp_path, jpeg_bytes(200))
        adapter = self._adapter(FakeStripper(error=FileNotFoundError("exiftool")))
        assert asyncio.run(adapter.sanitize(path, "image/jpeg")).is_ok()

    def test_file_of_another_type_is_left_to_type_check(self, tmp_path: Path) -> None:
        path = _write(tmp_path, pdf_bytes(200))
        assert asyncio.run(self._adapter(FakeStripper()).sanitize(path, "image/jpeg")).is_ok()


# ---------------------------------------------------------------------------
# StoragePlacer
# ---------------------------------------------------------------------------


class TestStoragePlacer:
    def _placer(self, tmp_path: Path) -> StoragePlacer:
        return StoragePlacer(tmp_path / "storage", tmp_path / "quarantine", FakeClock())

    def test_artifact_name_extension_follows_mime_type(self) -> None:
        assert artifact_name("abc", "image/jpeg") == "abc.jpg"
        assert artifact_name("abc", "application/pdf") == "abc.pdf"
        assert artifact_name("abc", "application/x-custom") == "abc"

    def test_dated_path(self, tmp_path: Path) -> None:
        path = self._placer(tmp_path).dated_path("abc", "image/png")
        assert path == tmp_path / "storage" / "2026" / "01" / "01" / "abc.png"

    def test_promote_moves_file(self, tmp_path: Path) -> None:
        source = _write(tmp_path, b"data")
        result = asyncio.run(self._placer(tmp_path).promote(source, "abc", "application/pdf"))
        target = result.unwrap()
        assert target.read_bytes() == b"data"
        assert not source.exists()

    def test_promote_refuses_to_overwrite(self, tmp_path: Path) -> None:
        placer = self._placer(tmp_path)
        target = placer.dated_path("abc", "application/pdf")
        target.parent.mkdir(parents=True)
        target.write_bytes(b"existing")
        source = _write(tmp_path, b"new")

        result = asyncio.run(placer.promote(source, "abc", "application/pdf"))

        assert result.is_err()
        assert result.error.reason is FailureReason.STORAGE_FAILURE
        assert target.read_bytes() == b"existing"
        assert source.exists()

    def test_quarantine_moves_file(self, tmp_path: Path) -> None:
        source = _write(tmp_path, b"evil")
        target = asyncio.run(self._placer(tmp_path).quarantine(source, "abc", "image/jpeg"))
        assert target == tmp_path / "quarantine" / "abc.jpg"
        assert target.read_bytes() == b"evil"

    def test_quarantine_missing_source_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            asyncio.run(self._placer(tmp_path).quarantine(tmp_path / "gone", "abc", "image/jpeg"))

    def test_discard_is_idempotent(self, tmp_path: Path) -> None:
        placer = self._placer(tmp_path)
        source = _write(tmp_path, b"data")
        assert asyncio.run(placer.discard(source)) is True
        assert asyncio.run(placer.discard(source)) is True
        assert not source.exists()
