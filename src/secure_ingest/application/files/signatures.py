"""Magic-number signatures and structural checks per MIME type."""

from __future__ import annotations

from typing import Callable, Final, Mapping

OCTET_STREAM: Final = "application/octet-stream"

# Bytes needed from the head of a file to recognise any known type.
SNIFF_BYTES: Final = 4096
# Bytes read from the tail of a file for trailer checks.
TAIL_BYTES: Final = 1024

JPEG_SOI: Final = b"\xff\xd8\xff"
JPEG_EOI: Final = b"\xff\xd9"
PNG_MAGIC: Final = b"\x89PNG\r\n\x1a\n"
PNG_IEND: Final = b"IEND"
PDF_MAGIC: Final = b"%PDF"
PDF_EOF: Final = b"%%EOF"
GIF_MAGICS: Final = (b"GIF87a", b"GIF89a")
GIF_TRAILER: Final = b"\x3b"

DEFAULT_SIGNATURES: Final[Mapping[str, tuple[bytes, ...]]] = {
    "image/jpeg": (JPEG_SOI,),
    "image/png": (PNG_MAGIC[:4],),
    "application/pdf": (PDF_MAGIC,),
    "image/gif": GIF_MAGICS,
}

# Suffix given to stored artifacts of each type.
EXTENSIONS: Final[Mapping[str, str]] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "application/pdf": ".pdf",
    "image/gif": ".gif",
}

_PADDING = b"\x00\r\n\t "


def _jpeg_intact(head: bytes, tail: bytes) -> bool:
    return head.startswith(JPEG_SOI) and tail.rstrip(_PADDING).endswith(JPEG_EOI)


def _png_intact(head: bytes, tail: bytes) -> bool:
    # IEND chunk: type (4) + CRC (4) closes the stream
    return head.startswith(PNG_MAGIC) and PNG_IEND in tail[-12:]


def _pdf_intact(head: bytes, tail: bytes) -> bool:
    return head.startswith(PDF_MAGIC + b"-") and PDF_EOF in tail


def _gif_intact(head: bytes, tail: bytes) -> bool:
    return head.startswith(GIF_MAGICS) and tail.rstrip(_PADDING).endswith(GIF_TRAILER)


STRUCTURE_CHECKS: Final[Mapping[str, Callable[[bytes, bytes], bool]]] = {
    "image/jpeg": _jpeg_intact,
    "image/png": _png_intact,
    "application/pdf": _pdf_intact,
    "image/gif": _gif_intact,
}


__all__ = [
    "DEFAULT_SIGNATURES",
    "EXTENSIONS",
    "OCTET_STREAM",
    "SNIFF_BYTES",
    "STRUCTURE_CHECKS",
    "TAIL_BYTES",
]
