"""Observability – Logger protocol."""
from __future__ import annotations

from typing import Any, Protocol


class Logger(Protocol):
    """Structured logger: an event name plus keyword context.

    Satisfied by structlog's bound loggers; anything injected into the
    uploader in their place must accept the same call shape.
    """

    def debug(self, event: str, **kw: Any) -> None: ...
    def info(self, event: str, **kw: Any) -> None: ...
    def warning(self, event: str, **kw: Any) -> None: ...
    def error(self, event: str, **kw: Any) -> None: ...
    def exception(self, event: str, **kw: Any) -> None: ...
    def bind(self, **kw: Any) -> "Logger": ...


__all__ = ["Logger"]
