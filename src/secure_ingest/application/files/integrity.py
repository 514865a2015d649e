"""End-to-end integrity verification of reassembled artifacts."""

from __future__ import annotations

import asyncio
import hashlib
import hmac
from pathlib import Path
from typing import Final

from secure_ingest.kernel.errors import IntegrityMismatchError
from secure_ingest.kernel.types import Err, Ok, Result

_READ_SIZE: Final = 64 * 1024


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Path) -> str:
    """Calculate SHA256 checksum of a file, reading it in blocks.

    Args:
        path: File to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for block in iter(lambda: fh.read(_READ_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


class IntegrityVerifier:
    """Compares the digest of a file on disk with a client-declared one."""

    async def digest(self, path: Path) -> str:
        return await asyncio.to_thread(sha256_file, path)

    async def verify(self, path: Path, expected: str) -> Result[str, IntegrityMismatchError]:
        actual = await self.digest(path)
        if not hmac.compare_digest(actual, expected.lower()):
            return Err(IntegrityMismatchError(expected=expected, actual=actual))
        return Ok(actual)


__all__ = ["IntegrityVerifier", "sha256_bytes", "sha256_file"]
