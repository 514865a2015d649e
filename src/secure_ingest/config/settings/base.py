"""Settings base class: a validated dataclass bound to an env prefix."""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class Settings:
    """Subclasses declare fields with defaults and override ``_validate``.

    Values are read from ``<PREFIX>_<FIELD>`` variables; see :meth:`env_key`.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def env_key(cls, field_name: str) -> str:
        if not cls._prefix:
            return field_name.upper()
        return f"{cls._prefix}_{field_name}".upper()

    def _validate(self) -> None:
        """Raise :class:`InvalidSettingValueError` for unusable values."""


__all__ = ["Settings"]
