"""Metadata stripping – tool port and best-effort adapter."""
from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from secure_ingest.application.files.sniffer import ContentSniffer
from secure_ingest.kernel.errors import SanitizationFailureError
from secure_ingest.kernel.types import Err, Ok, Result
from secure_ingest.observability.logging import get_logger
from secure_ingest.resilience.timeouts import Deadline, DeadlineExceededError, run_with_deadline

logger = get_logger(__name__)


@runtime_checkable
class MetadataStripper(Protocol):
    """Port: remove embedded metadata from a file in place."""

    async def strip_all(self, path: Path) -> None: ...


class MetadataStripAdapter:
    """Strips metadata, then checks the file is still a valid *mime_type*.

    Stripping itself is best effort: a tool error or timeout is logged and
    tolerated.  A file the tool left structurally broken is not.  Files that
    were not a valid *mime_type* to begin with are left to the content-type
    check.
    """

    def __init__(
        self,
        stripper: MetadataStripper,
        sniffer: ContentSniffer,
        timeout_seconds: float,
    ) -> None:
        self._stripper = stripper
        self._sniffer = sniffer
        self.timeout_seconds = timeout_seconds

    async def sanitize(self, path: Path, mime_type: str) -> Result[None, SanitizationFailureError]:
        was_intact = await self._sniffer.is_intact(path, mime_type)
        try:
            await run_with_deadline(
                lambda: self._stripper.strip_all(path),
                Deadline.after(self.timeout_seconds),
                name="metadata strip",
            )
        except DeadlineExceededError:
            logger.warning("strip.timeout", path=str(path), timeout_seconds=self.timeout_seconds)
        except Exception as exc:  # noqa: BLE001
            logger.warning("strip.tool_error", path=str(path), error=repr(exc))

        if was_intact and not await self._sniffer.is_intact(path, mime_type):
            return Err(SanitizationFailureError(
                f"Artifact is no longer a valid {mime_type} after metadata removal",
            ))
        return Ok(None)


__all__ = ["MetadataStripAdapter", "MetadataStripper"]
