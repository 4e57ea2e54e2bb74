"""Config – 12-factor export settings and loaders."""

from dt_export.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ExportSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from dt_export.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ExportSettings",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
