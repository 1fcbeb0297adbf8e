"""Config validation – errors raised while loading push settings.

These are not isolated like registry failures: a bad configuration stops the
host before anything is pushed, so they propagate to the caller.
"""
from __future__ import annotations

from mp_metrics.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings could not be loaded or are inconsistent."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A setting needed for the requested operation has no value.

    ``setting_name`` is the environment variable to set, e.g. ``MP_METRICS_JOB``.
    """
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"{setting_name} is required but not set",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be used."""
    default_code = "invalid_setting_value"

    def __init__(
        self,
        setting_name: str,
        value: object,
        reason: str,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"{setting_name}={value!r} rejected: {reason}",
            detail={"setting": setting_name, "value": value},
            cause=cause,
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
