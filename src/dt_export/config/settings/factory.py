"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from dt_export.config.settings.base import Settings
from dt_export.config.settings.loaders import SettingsLoader, is_required
from dt_export.config.validation.errors import (
    ConfigError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


def _as_values(instance: Settings) -> dict[str, Any]:
    return {f.name: getattr(instance, f.name) for f in dataclasses.fields(instance)}  # type: ignore[arg-type]


class SettingsFactory:
    """Build one settings object from layered sources.

    Each loader yields a complete instance; its field values replace those of
    the loaders before it, and *overrides* are applied last.  A loader whose
    source lacks a required variable is skipped, so a deployment may provide
    ``endpoint_url`` through overrides alone while chunk sizes still come from
    the environment.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Raises
        ------
        MissingRequiredSettingError
            When no source supplies a required field.
        InvalidSettingValueError
            When a loader or ``_validate`` rejects a value.
        ConfigError
            On any other construction failure, such as an unknown override.
        """
        values: dict[str, Any] = {}
        for loader in loaders or ():
            try:
                values.update(_as_values(loader.load(settings_cls)))
            except MissingRequiredSettingError:
                continue
        values.update(overrides or {})

        absent = [
            f.name
            for f in dataclasses.fields(settings_cls)  # type: ignore[arg-type]
            if is_required(f) and f.name not in values
        ]
        if absent:
            raise MissingRequiredSettingError(absent[0])

        try:
            return settings_cls(**values)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}") from exc


__all__ = ["SettingsFactory"]
