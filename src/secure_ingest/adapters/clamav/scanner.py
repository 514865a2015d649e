"""ClamAV adapter – ClamdScanner speaking clamd's INSTREAM protocol."""
from __future__ import annotations

import asyncio
import struct
from pathlib import Path
from typing import Final

from secure_ingest.application.files import ScanReport
from secure_ingest.kernel.errors import BaseError
from secure_ingest.observability.logging import get_logger

logger = get_logger(__name__)

_BLOCK_SIZE: Final = 64 * 1024
_END_OF_STREAM: Final = struct.pack("!L", 0)


class ClamdError(BaseError):
    """clamd answered with an error or an unreadable reply."""

    default_code = "clamd_error"


def parse_reply(raw: bytes) -> ScanReport:
    """Parse ``stream: OK`` / ``stream: <name> FOUND`` / ``... ERROR`` replies."""
    text = raw.rstrip(b"\0").decode("utf-8", errors="replace").strip()
    if not text:
        raise ClamdError("Empty reply from clamd")

    threats: list[str] = []
    for line in text.splitlines():
        _, _, verdict = line.rpartition(": ")
        verdict = verdict.strip()
        if verdict == "OK":
            continue
        if verdict.endswith(" FOUND"):
            threats.append(verdict.removesuffix(" FOUND"))
        elif verdict.endswith("ERROR"):
            raise ClamdError(f"clamd error: {verdict}", detail={"reply": text})
        else:
            raise ClamdError(f"Unrecognised clamd reply: {line!r}", detail={"reply": text})
    return ScanReport(is_infected=bool(threats), threats=threats)


class ClamdScanner:
    """Streams a file to clamd over a Unix socket or TCP.

    Streaming the bytes (rather than ``SCAN <path>``) means clamd does not
    need read access to the temp directory.
    """

    def __init__(
        self,
        *,
        socket_path: str | None = "/var/run/clamav/clamd.ctl",
        host: str = "127.0.0.1",
        port: int = 3310,
    ) -> None:
        self.socket_path = socket_path
        self.host = host
        self.port = port

    async def _connect(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        if self.socket_path:
            return await asyncio.open_unix_connection(self.socket_path)
        return await asyncio.open_connection(self.host, self.port)

    async def scan(self, path: Path) -> ScanReport:
        reader, writer = await self._connect()
        try:
            writer.write(b"zINSTREAM\0")
            with path.open("rb") as fh:
                while block := await asyncio.to_thread(fh.read, _BLOCK_SIZE):
                    writer.write(struct.pack("!L", len(block)) + block)
                    await writer.drain()
            writer.write(_END_OF_STREAM)
            await writer.drain()
            raw = await reader.read()
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as exc:
                logger.debug("clamd.close_failed", error=repr(exc))

        report = parse_reply(raw)
        logger.debug("clamd.scanned", path=str(path), infected=report.is_infected)
        return report


__all__ = ["ClamdError", "ClamdScanner", "parse_reply"]
