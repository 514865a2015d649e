"""Settings loaders: process environment, optionally seeded from a ``.env`` file."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, TypeVar

from dotenv import load_dotenv

from secure_ingest.config.settings.base import Settings
from secure_ingest.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _type_name(type_hint: Any) -> str:
    # postponed annotations arrive as strings such as "frozenset[str]"
    if isinstance(type_hint, str):
        return type_hint.replace(" ", "")
    origin = getattr(type_hint, "__origin__", None)
    if origin is not None:
        return f"{origin.__name__}[...]"
    return getattr(type_hint, "__name__", "")


def coerce(raw: str, type_hint: Any) -> Any:
    """Convert an environment string to the field's declared type.

    Raises:
        ValueError: *raw* cannot be read as that type.
    """
    name = _type_name(type_hint)
    if name == "bool":
        return raw.strip().lower() in _TRUTHY
    if name == "int":
        return int(raw.replace("_", ""))
    if name == "float":
        return float(raw)
    if name.startswith(("list[", "frozenset[")):
        items = [item.strip() for item in raw.split(",") if item.strip()]
        return frozenset(items) if name.startswith("frozenset[") else items
    return raw


class SettingsLoader(abc.ABC):
    """Port: build a settings instance from some external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Reads each field from :meth:`Settings.env_key`; unset fields keep
    their dataclass default.
    """

    def load(self, settings_class: type[T]) -> T:
        values: dict[str, Any] = {}
        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = settings_class.env_key(field.name)
            raw = os.environ.get(key)
            if raw is None:
                no_default = (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                )
                if no_default:
                    raise MissingRequiredSettingError(key)
                continue
            try:
                values[field.name] = coerce(raw, field.type)
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, str(exc)) from exc

        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Could not build {settings_class.__name__}: {exc}", cause=exc) from exc


class DotenvSettingsLoader(SettingsLoader):
    """Loads ``env_file`` into the process environment, then defers to
    :class:`EnvSettingsLoader`.  Variables already set win unless
    ``override`` is true.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "coerce"]
