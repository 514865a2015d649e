"""Configuration errors, raised while settings are loaded or validated."""
from typing import Any

from secure_ingest.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings could not be loaded or do not describe a usable uploader."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"{setting_name} is not set and has no default",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """Raised by loaders for unparseable values and by ``_validate`` hooks."""
    default_code = "invalid_setting"

    def __init__(self, setting_name: str, value: Any, reason: str) -> None:
        super().__init__(
            f"{setting_name}={value!r} rejected: {reason}",
            detail={"setting": setting_name, "value": repr(value)},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
