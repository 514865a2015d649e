"""Validation of declared file metadata."""
from __future__ import annotations

import re
from typing import Final

from secure_ingest.application.uploads.models import FileInfo
from secure_ingest.kernel.errors import InvalidFileInfoError

_NAME_PATTERN: Final = re.compile(r"^[A-Za-z0-9\-_. ]+$")
_SHA256_PATTERN: Final = re.compile(r"^[0-9a-fA-F]{64}$")
_NAME_MAX_LENGTH: Final = 255


def file_info_errors(
    info: FileInfo,
    *,
    max_file_size: int,
    allowed_types: frozenset[str],
) -> list[str]:
    """Return every problem with *info*; empty when it is acceptable."""
    errors: list[str] = []

    name = info.name
    if not isinstance(name, str) or not name:
        errors.append("name is required")
    elif len(name) > _NAME_MAX_LENGTH:
        errors.append(f"name longer than {_NAME_MAX_LENGTH} characters")
    elif not _NAME_PATTERN.fullmatch(name) or name.strip(" .") == "":
        errors.append("name contains characters outside [A-Za-z0-9-_. ]")

    size = info.size
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        errors.append("size must be a positive integer")
    elif size > max_file_size:
        errors.append(f"size {size} exceeds limit of {max_file_size} bytes")

    if info.mime_type not in allowed_types:
        errors.append(f"type {info.mime_type!r} is not allowed")

    if not isinstance(info.sha256, str) or not _SHA256_PATTERN.fullmatch(info.sha256):
        errors.append("sha256 must be 64 hexadecimal characters")

    return errors


def validate_file_info(
    info: FileInfo,
    *,
    max_file_size: int,
    allowed_types: frozenset[str],
) -> None:
    """Raises :class:`InvalidFileInfoError` listing all problems found."""
    errors = file_info_errors(info, max_file_size=max_file_size, allowed_types=allowed_types)
    if errors:
        raise InvalidFileInfoError("; ".join(errors), errors=errors)


__all__ = ["file_info_errors", "validate_file_info"]
