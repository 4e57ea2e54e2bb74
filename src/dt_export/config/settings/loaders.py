"""Config settings – EnvSettingsLoader, DotenvSettingsLoader.

Export deployments are configured through ``DT_EXPORT_*`` variables, either
exported in the process environment or collected in a ``.env`` file next to
the service.  Values arrive as strings and are coerced from the dataclass
annotation of the target field.
"""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, Callable, TypeVar

from dotenv import load_dotenv

from dt_export.config.settings.base import Settings
from dt_export.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


def _to_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


_SCALARS: dict[str, Callable[[str], Any]] = {
    "bool": _to_bool,
    "int": int,
    "float": float,
    "str": str,
}


def coerce(raw: str, annotation: Any) -> Any:
    """Convert *raw* to the type named by a field *annotation*.

    Annotations are strings under ``from __future__ import annotations``, so
    both ``int`` and ``"int"`` are accepted.  ``list[...]`` fields take a
    comma separated value.  Unknown annotations pass the string through.
    """
    name = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", "")
    if getattr(annotation, "__origin__", None) is list or name.startswith("list"):
        return _to_list(raw)
    convert = _SCALARS.get(name)
    return convert(raw) if convert is not None else raw


def is_required(field: dataclasses.Field) -> bool:  # type: ignore[type-arg]
    return field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING  # type: ignore[misc]


def env_key(settings_class: type[Settings], field_name: str) -> str:
    prefix = getattr(settings_class, "_prefix", "")
    return f"{prefix}_{field_name}".upper().lstrip("_")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Read ``<PREFIX>_<FIELD>`` for every field of *settings_class*.

    Unset optional fields keep their dataclass default; an unset required
    field raises :class:`MissingRequiredSettingError` naming the variable.
    """

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = env_key(settings_class, field.name)
            raw = environ.get(key)
            if raw is None:
                if is_required(field):
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
            raise ConfigError(f"Failed to load {settings_class.__name__} from environment: {exc}") from exc


class DotenvSettingsLoader(SettingsLoader):
    """Populate the environment from a ``.env`` file, then read it.

    Variables already set in the process win unless *override* is true.
    """

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "coerce"]
