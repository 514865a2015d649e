"""Config settings – env-based configuration."""
from secure_ingest.config.settings.base import Settings
from secure_ingest.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from secure_ingest.config.settings.uploader import UploaderSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
    "UploaderSettings",
]
