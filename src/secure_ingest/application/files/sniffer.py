"""Content-type sniffing from leading bytes."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Mapping

from secure_ingest.application.files.signatures import (
    DEFAULT_SIGNATURES,
    OCTET_STREAM,
    SNIFF_BYTES,
    STRUCTURE_CHECKS,
    TAIL_BYTES,
)
from secure_ingest.kernel.errors import ContentTypeMismatchError
from secure_ingest.kernel.types import Err, Ok, Result


def _read_head_and_tail(path: Path) -> tuple[bytes, bytes]:
    with path.open("rb") as fh:
        head = fh.read(SNIFF_BYTES)
        size = fh.seek(0, 2)
        fh.seek(max(0, size - TAIL_BYTES))
        tail = fh.read(TAIL_BYTES)
    return head, tail


class ContentSniffer:
    """Detects the true type of a file and checks it against the declared one.

    The declared MIME type is never trusted: a file whose digest matches what
    the client announced can still carry a different format.
    """

    def __init__(
        self,
        allowed_types: frozenset[str],
        signatures: Mapping[str, tuple[bytes, ...]] = DEFAULT_SIGNATURES,
    ) -> None:
        self.allowed_types = allowed_types
        self._signatures = signatures

    def sniff(self, head: bytes) -> str:
        """Return the MIME type whose signature prefixes *head*."""
        for mime_type, magics in self._signatures.items():
            if head.startswith(magics):
                return mime_type
        return OCTET_STREAM

    async def sniff_file(self, path: Path) -> str:
        head, _ = await asyncio.to_thread(_read_head_and_tail, path)
        return self.sniff(head)

    async def verify(self, path: Path, declared: str) -> Result[str, ContentTypeMismatchError]:
        detected = await self.sniff_file(path)
        if detected != declared or detected not in self.allowed_types:
            return Err(ContentTypeMismatchError(declared=declared, detected=detected))
        return Ok(detected)

    async def is_intact(self, path: Path, mime_type: str) -> bool:
        """Structural check: header and trailer of *mime_type* are in place."""
        check = STRUCTURE_CHECKS.get(mime_type)
        if check is None:
            return False
        try:
            head, tail = await asyncio.to_thread(_read_head_and_tail, path)
        except OSError:
            return False
        return check(head, tail)


__all__ = ["ContentSniffer"]
