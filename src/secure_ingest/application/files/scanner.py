"""Malware scanning – engine port and deadline-bounded adapter."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from secure_ingest.kernel.errors import (
    MalwareDetectedError,
    PipelineError,
    ScanFailedError,
    ScanTimeoutError,
)
from secure_ingest.kernel.types import Err, Ok, Result
from secure_ingest.observability.logging import get_logger
from secure_ingest.resilience.timeouts import Deadline, DeadlineExceededError, run_with_deadline

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScanReport:
    is_infected: bool
    threats: list[str] = field(default_factory=list)


@runtime_checkable
class MalwareScanner(Protocol):
    """Port: scan a file on disk for malware."""

    async def scan(self, path: Path) -> ScanReport: ...


class MalwareScanAdapter:
    """Runs the engine under a hard deadline and fails closed.

    A timeout is a definite failure: the scan task is cancelled, never
    retried.  Engine errors are failures too, never a pass.
    """

    def __init__(self, scanner: MalwareScanner, timeout_seconds: float) -> None:
        self._scanner = scanner
        self.timeout_seconds = timeout_seconds

    async def scan(self, path: Path) -> Result[ScanReport, PipelineError]:
        try:
            report = await run_with_deadline(
                lambda: self._scanner.scan(path),
                Deadline.after(self.timeout_seconds),
                name="malware scan",
            )
        except DeadlineExceededError as exc:
            return Err(ScanTimeoutError(
                f"Scan did not finish within {self.timeout_seconds:g}s",
                cause=exc,
            ))
        except Exception as exc:  # noqa: BLE001
            logger.warning("scan.engine_error", path=str(path), error=repr(exc))
            return Err(ScanFailedError(f"Scan engine error: {exc}", cause=exc))

        if report.is_infected:
            return Err(MalwareDetectedError(list(report.threats)))
        return Ok(report)


__all__ = ["MalwareScanAdapter", "MalwareScanner", "ScanReport"]
