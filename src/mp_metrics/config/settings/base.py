"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar, Mapping, TypeVar

S = TypeVar("S", bound="Settings")


@dataclasses.dataclass
class Settings:
    """Dataclass whose fields are read from ``<PREFIX>_<FIELD>`` variables.

    Subclasses set ``_prefix`` and may override ``_validate`` to check field
    combinations; it runs after every construction, including direct ones.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Hook for cross-field checks; raise a ``ConfigError`` subclass."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable that feeds *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    @classmethod
    def from_env(cls: type[S], environ: Mapping[str, str] | None = None) -> S:
        """Load from *environ* (defaults to ``os.environ``)."""
        from mp_metrics.config.settings.loaders import EnvSettingsLoader

        return EnvSettingsLoader(environ).load(cls)


__all__ = ["Settings"]
