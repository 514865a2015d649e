"""Storage placement – dated promotion, quarantine and discard."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from secure_ingest.application.files.signatures import EXTENSIONS
from secure_ingest.kernel.errors import StorageFailureError
from secure_ingest.kernel.time import Clock, SystemClock
from secure_ingest.kernel.types import Err, Ok, Result
from secure_ingest.observability.logging import get_logger

logger = get_logger(__name__)


def artifact_name(upload_id: str, mime_type: str) -> str:
    """``<upload_id><ext>`` with ``ext`` taken from the verified type.

    Nothing of the client's file name reaches the disk; types without a
    known extension are stored bare.
    """
    return f"{upload_id}{EXTENSIONS.get(mime_type, '')}"


def _move(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.exists():
        raise FileExistsError(f"{target} already exists")
    # rename only: a cross-device move fails instead of leaving a copy behind
    os.rename(source, target)


class StoragePlacer:
    """Moves verified artifacts to ``storage_dir/YYYY/MM/DD/<upload_id><ext>``
    and infected ones to ``quarantine_dir/<upload_id><ext>``.
    """

    def __init__(
        self,
        storage_dir: Path,
        quarantine_dir: Path,
        clock: Clock | None = None,
    ) -> None:
        self.storage_dir = storage_dir
        self.quarantine_dir = quarantine_dir
        self._clock = clock or SystemClock()

    def dated_path(self, upload_id: str, mime_type: str) -> Path:
        day = self._clock.today()
        return (
            self.storage_dir
            / f"{day.year:04d}"
            / f"{day.month:02d}"
            / f"{day.day:02d}"
            / artifact_name(upload_id, mime_type)
        )

    def quarantine_path(self, upload_id: str, mime_type: str) -> Path:
        return self.quarantine_dir / artifact_name(upload_id, mime_type)

    async def promote(
        self,
        source: Path,
        upload_id: str,
        mime_type: str,
    ) -> Result[Path, StorageFailureError]:
        target = self.dated_path(upload_id, mime_type)
        try:
            await asyncio.to_thread(_move, source, target)
        except OSError as exc:
            return Err(StorageFailureError(
                f"Could not move artifact into storage: {exc}",
                detail={"target": str(target)},
                cause=exc,
            ))
        return Ok(target)

    async def quarantine(self, source: Path, upload_id: str, mime_type: str) -> Path:
        """Retain an infected artifact.  Raises ``OSError`` if the move fails."""
        target = self.quarantine_path(upload_id, mime_type)
        await asyncio.to_thread(_move, source, target)
        return target

    async def discard(self, path: Path) -> bool:
        """Best-effort removal; returns whether the file is gone."""
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            logger.warning("storage.discard_failed", path=str(path), error=repr(exc))
            return False
        return True


async def ensure_directories(*directories: Path) -> None:
    for directory in directories:
        await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)


__all__ = ["StoragePlacer", "artifact_name", "ensure_directories"]
