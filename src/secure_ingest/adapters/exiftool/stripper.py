"""ExifTool adapter – ExifToolStripper."""
from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from secure_ingest.kernel.errors import BaseError


class ExifToolError(BaseError):
    """exiftool is missing or exited with a non-zero status."""

    default_code = "exiftool_error"


class ExifToolStripper:
    """Runs ``exiftool -all= -overwrite_original <path>`` in a subprocess.

    If the call is cancelled (deadline exceeded) the child is killed and
    reaped before the cancellation propagates.
    """

    def __init__(self, executable: str = "exiftool") -> None:
        self.executable = executable

    def command(self, path: Path) -> list[str]:
        return [self.executable, "-q", "-all=", "-overwrite_original", str(path)]

    async def strip_all(self, path: Path) -> None:
        if shutil.which(self.executable) is None:
            raise ExifToolError(f"'{self.executable}' not found on PATH")

        proc = await asyncio.create_subprocess_exec(
            *self.command(path),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            proc.kill()
            await proc.wait()
            raise

        if proc.returncode != 0:
            raise ExifToolError(
                f"exiftool exited with status {proc.returncode}",
                detail={"stderr": stderr.decode("utf-8", errors="replace").strip()},
            )


__all__ = ["ExifToolError", "ExifToolStripper"]
