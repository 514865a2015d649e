"""Root of the secure_ingest error hierarchy."""

from __future__ import annotations

import json
from typing import Any, ClassVar


class BaseError(Exception):
    """Every error the uploader raises, or records on a session, derives
    from this class.

    ``code`` is a stable slug for API payloads.  ``detail`` holds context that
    is safe to log (ids, paths, sizes; never file contents).  Concrete
    subclasses also carry a ``reason`` tag, see :class:`FailureReason`.
    """

    default_code: ClassVar[str] = "ingest_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def reason_tag(self) -> str | None:
        reason = getattr(type(self), "reason", None)
        return None if reason is None else str(reason)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.reason_tag is not None:
            payload["reason"] = self.reason_tag
        if self.detail:
            payload["detail"] = self.detail
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


__all__ = ["BaseError"]
