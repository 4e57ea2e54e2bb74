"""Config settings – 12-factor env-based configuration."""
from dt_export.config.settings.base import Settings
from dt_export.config.settings.export import FORMAT_NAMES, ExportSettings
from dt_export.config.settings.factory import SettingsFactory
from dt_export.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "FORMAT_NAMES",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ExportSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
