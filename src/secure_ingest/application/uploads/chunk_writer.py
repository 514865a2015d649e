"""Positional writer of chunk byte ranges into the temporary artifact."""
from __future__ import annotations

import asyncio
import os
from pathlib import Path


def _create(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    os.close(fd)


def _pwrite(path: Path, offset: int, data: bytes) -> None:
    # no O_CREAT: a reclaimed artifact must not be resurrected by a late write
    fd = os.open(path, os.O_WRONLY)
    try:
        view = memoryview(data)
        while view:
            written = os.pwrite(fd, view, offset)
            view = view[written:]
            offset += written
    finally:
        os.close(fd)


class ChunkWriter:
    """Writes each chunk at ``index * chunk_size``.

    Ranges of different indices never overlap, so concurrent writes to one
    artifact need no lock, and rewriting an index is idempotent.
    """

    async def create(self, path: Path) -> None:
        await asyncio.to_thread(_create, path)

    async def write(self, path: Path, offset: int, data: bytes) -> None:
        await asyncio.to_thread(_pwrite, path, offset, data)

    async def size(self, path: Path) -> int:
        stat = await asyncio.to_thread(path.stat)
        return stat.st_size


__all__ = ["ChunkWriter"]
